from __future__ import annotations

import datetime as dt
import unittest

from ohlcview_plot.composer import compose_chart, compose_scene
from ohlcview_plot.config import DEFAULT_CONFIG, validate_chart_config
from ohlcview_plot.records import PriceRecord
from ohlcview_plot.scales import build_scales
from ohlcview_plot.scene import LineShape, RectShape

EXAMPLE = [
    {"date": "2024-01-01", "open": 10, "high": 12, "low": 9, "close": 11},
    {"date": "2024-01-02", "open": 11, "high": 13, "low": 10, "close": 12.5},
]


def _month_series() -> list[PriceRecord]:
    out = []
    price = 100.0
    for i in range(30):
        step = 3.0 if i % 3 else -4.0
        open_ = price
        close = price + step
        out.append(PriceRecord(dt.date(2024, 2, 1) + dt.timedelta(days=i), open_, max(open_, close) + 1.0, min(open_, close) - 1.0, close))
        price = close
    return out


class SceneComposerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.series = _month_series()
        self.scales = build_scales(self.series, DEFAULT_CONFIG.width, DEFAULT_CONFIG.height, DEFAULT_CONFIG.margin)

    def test_one_hoverable_shape_per_record_for_every_kind(self) -> None:
        for kind, role in (("line", "marker"), ("bar", "bar"), ("candlestick", "body")):
            with self.subTest(kind=kind):
                scene = compose_scene(self.series, self.scales, kind, False)
                self.assertEqual(len(scene.hoverable_shapes), len(self.series))
                self.assertEqual(len(scene.shapes_with_role(role)), len(self.series))
                self.assertEqual([t.index for t in scene.hover_targets], list(range(len(self.series))))

    def test_chart_kind_does_not_change_axes(self) -> None:
        axes = {}
        for kind in ("line", "bar", "candlestick"):
            scene = compose_chart(self.series, kind, False)
            axes[kind] = scene.axes
        self.assertEqual(axes["line"], axes["bar"])
        self.assertEqual(axes["bar"], axes["candlestick"])

    def test_compose_is_idempotent(self) -> None:
        for kind in ("line", "bar", "candlestick"):
            with self.subTest(kind=kind):
                first = compose_scene(self.series, self.scales, kind, True)
                second = compose_scene(self.series, self.scales, kind, True)
                self.assertEqual(first, second)

    def test_grid_toggle_only_adds_gridlines(self) -> None:
        for kind in ("line", "bar", "candlestick"):
            with self.subTest(kind=kind):
                plain = compose_scene(self.series, self.scales, kind, False)
                gridded = compose_scene(self.series, self.scales, kind, True)
                self.assertEqual(plain.grid, ())
                self.assertGreater(len(gridded.grid), 0)
                self.assertTrue(all(line.role == "grid" for line in gridded.grid))
                self.assertEqual(plain.series, gridded.series)
                self.assertEqual(plain.axes, gridded.axes)

    def test_gridlines_extend_axis_ticks_across_the_plot(self) -> None:
        scene = compose_scene(self.series, self.scales, "line", True)
        x_axis = scene.axis("bottom")
        y_axis = scene.axis("left")
        vertical = [g for g in scene.grid if g.x1 == g.x2]
        horizontal = [g for g in scene.grid if g.y1 == g.y2]
        self.assertEqual([g.x1 for g in vertical], [t.position for t in x_axis.ticks])
        self.assertEqual([g.y1 for g in horizontal], [t.position for t in y_axis.ticks])
        self.assertEqual((horizontal[0].x1, horizontal[0].x2), (60.0, 940.0))

    def test_empty_series_composes_to_nothing(self) -> None:
        for raw in ([], None):
            scene = compose_scene(raw, self.scales, "candlestick", True)
            self.assertEqual(scene.shape_count, 0)
            self.assertEqual(scene.axes, ())
            self.assertEqual(scene.hover_targets, ())
            self.assertTrue(scene.is_empty)

    def test_malformed_series_composes_to_nothing(self) -> None:
        with self.assertLogs("ohlcview_plot.records", level="WARNING"):
            scene = compose_chart([{"date": "2024-01-01", "open": "x"}], "line", False)
        self.assertTrue(scene.is_empty)

    def test_invalid_price_records_compose_to_nothing(self) -> None:
        day = dt.date(2024, 2, 1)
        cases = {
            "nan high": [self.series[0], PriceRecord(day, 1.0, float("nan"), 0.5, 1.5)],
            "inf close": [PriceRecord(day, 1.0, 2.0, 0.5, float("inf"))],
            "non-date": [PriceRecord(20240201, 1.0, 2.0, 0.5, 1.5)],
        }
        for name, series in cases.items():
            with self.subTest(name):
                with self.assertLogs("ohlcview_plot.records", level="WARNING"):
                    scene = compose_scene(series, self.scales, "line", False)
                self.assertTrue(scene.is_empty)
                with self.assertLogs("ohlcview_plot.records", level="WARNING"):
                    self.assertTrue(compose_chart(series, "bar", True).is_empty)

    def test_price_record_with_iso_string_date_renders(self) -> None:
        scene = compose_chart([PriceRecord("2024-01-01", 1.0, 2.0, 0.5, 1.5)], "bar", False)
        self.assertEqual(len(scene.hover_targets), 1)

    def test_unknown_chart_kind_raises(self) -> None:
        with self.assertRaises(ValueError):
            compose_scene(self.series, self.scales, "pie", False)

    def test_two_record_candlestick_example(self) -> None:
        scene = compose_chart(EXAMPLE, "candlestick", False)
        scales = build_scales(
            [PriceRecord(dt.date(2024, 1, 1), 10, 12, 9, 11), PriceRecord(dt.date(2024, 1, 2), 11, 13, 10, 12.5)],
            DEFAULT_CONFIG.width,
            DEFAULT_CONFIG.height,
            DEFAULT_CONFIG.margin,
        )
        wicks = scene.shapes_with_role("wick")
        bodies = scene.shapes_with_role("body")
        self.assertEqual([(w.y1, w.y2) for w in wicks], [(scales.y(12), scales.y(9)), (scales.y(13), scales.y(10))])
        bullish = DEFAULT_CONFIG.rgba("bullish_color")
        self.assertEqual([b.fill for b in bodies], [bullish, bullish])
        self.assertTrue(all(isinstance(w, LineShape) for w in wicks))
        self.assertTrue(all(isinstance(b, RectShape) for b in bodies))

    def test_background_and_axes(self) -> None:
        scene = compose_chart(EXAMPLE, "line", False)
        self.assertEqual(scene.background.corner_radius, DEFAULT_CONFIG.background_radius)
        self.assertEqual(scene.background.fill, (0, 0, 0, 128))
        self.assertEqual((scene.width, scene.height), (1000, 600))
        self.assertEqual([a.orientation for a in scene.axes], ["bottom", "left"])
        self.assertEqual(scene.axis("left").domain_line.x1, 60.0)
        self.assertEqual(scene.axis("bottom").domain_line.y1, 540.0)

    def test_config_changes_canvas(self) -> None:
        cfg = validate_chart_config({"width": 800, "height": 500})
        scene = compose_chart(EXAMPLE, "bar", False, config=cfg)
        self.assertEqual((scene.width, scene.height), (800, 500))
        self.assertEqual(scene.axis("bottom").domain_line.x2, 740.0)


if __name__ == "__main__":
    unittest.main()
