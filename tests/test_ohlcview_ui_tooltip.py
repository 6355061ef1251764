from __future__ import annotations

import datetime as dt
import unittest

from ohlcview_plot.composer import compose_chart
from ohlcview_plot.hover import HoverClear, HoverEvent, HoverTracker
from ohlcview_plot.records import PriceRecord
from ohlcview_ui.tooltip import TooltipModel

RECORD = PriceRecord(dt.date(2024, 1, 2), 11.0, 13.0, 10.0, 12.5)


class TooltipModelTests(unittest.TestCase):
    def test_positions_at_pointer_plus_offset(self) -> None:
        tooltip = TooltipModel(viewport_width=1000, viewport_height=600)
        tooltip.handle(HoverEvent(RECORD, 100.0, 200.0, "line"))
        self.assertTrue(tooltip.visible)
        self.assertEqual(tooltip.text, "2024-01-02: 12.5")
        self.assertEqual((tooltip.x, tooltip.y), (110.0, 210.0))
        self.assertGreater(tooltip.width, 0)

    def test_clamps_inside_the_viewport(self) -> None:
        tooltip = TooltipModel(viewport_width=1000, viewport_height=600)
        tooltip.handle(HoverEvent(RECORD, 995.0, 598.0, "candlestick"))
        self.assertEqual(tooltip.text, "2024-01-02: open 11, close 12.5")
        self.assertAlmostEqual(tooltip.x + tooltip.width, 1000.0)
        self.assertAlmostEqual(tooltip.y + tooltip.height, 600.0)

    def test_hides_on_clear(self) -> None:
        tooltip = TooltipModel(viewport_width=1000, viewport_height=600)
        tooltip.handle(HoverEvent(RECORD, 1.0, 1.0, "bar"))
        tooltip.handle(HoverClear())
        self.assertFalse(tooltip.visible)
        self.assertEqual(tooltip.text, "")

    def test_attach_follows_tracker(self) -> None:
        scene = compose_chart([RECORD.as_dict()], "bar", False)
        tracker = HoverTracker(scene)
        tooltip = TooltipModel(viewport_width=scene.width, viewport_height=scene.height)
        tooltip.attach(tracker)
        target = scene.hover_targets[0].hit_bounds
        tracker.pointer_move(target.x + target.width / 2.0, target.y + target.height / 2.0)
        self.assertTrue(tooltip.visible)
        tracker.pointer_leave()
        self.assertFalse(tooltip.visible)

    def test_rejects_empty_viewport(self) -> None:
        with self.assertRaises(ValueError):
            TooltipModel(viewport_width=0, viewport_height=10)


if __name__ == "__main__":
    unittest.main()
