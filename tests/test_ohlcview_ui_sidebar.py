from __future__ import annotations

import unittest

from ohlcview_plot.view_state import ViewStateController
from ohlcview_ui.controls.interaction import PointerEvent
from ohlcview_ui.sidebar import SIDEBAR_BUTTONS, Sidebar, SidebarButton


class SidebarTests(unittest.TestCase):
    def setUp(self) -> None:
        self.controller = ViewStateController()
        self.sidebar = Sidebar(self.controller)

    def test_buttons_and_labels(self) -> None:
        self.assertEqual(
            [(b.id, b.label) for b in self.sidebar.buttons],
            [("line", "Line Chart"), ("bar", "Bar Chart"), ("candlestick", "Candlestick Chart"), ("grid", "Toggle grid")],
        )

    def test_clicks_drive_the_view_state(self) -> None:
        self.sidebar.click("candlestick")
        self.assertEqual(self.controller.state.chart_kind, "candlestick")
        self.sidebar.click("grid")
        self.assertTrue(self.controller.state.grid_visible)
        self.assertEqual(self.sidebar.active_ids(), ("candlestick", "grid"))
        self.sidebar.click("grid")
        self.assertEqual(self.sidebar.active_ids(), ("candlestick",))

    def test_hover_sets_and_clears_label(self) -> None:
        self.sidebar.pointer_enter("bar")
        self.assertEqual(self.controller.state.hover_label, "Bar Chart")
        self.assertEqual(self.sidebar.button_state("bar"), "hover")
        self.sidebar.pointer_leave("bar")
        self.assertEqual(self.controller.state.hover_label, "")
        self.assertEqual(self.sidebar.button_state("bar"), "idle")

    def test_leaving_a_stale_button_keeps_the_newer_label(self) -> None:
        self.sidebar.pointer_enter("bar")
        self.sidebar.pointer_enter("grid")
        self.sidebar.pointer_leave("bar")
        self.assertEqual(self.controller.state.hover_label, "Toggle grid")

    def test_disabled_button_ignores_clicks(self) -> None:
        self.sidebar.set_disabled("bar", True)
        self.sidebar.click("bar")
        self.assertEqual(self.controller.state.chart_kind, "line")
        self.assertEqual(self.sidebar.button_state("bar"), "disabled")

    def test_unknown_button_is_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "unknown sidebar button"):
            self.sidebar.click("pie")

    def test_duplicate_ids_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Sidebar(self.controller, SIDEBAR_BUTTONS + (SidebarButton(id="line", label="Again", chart_kind="line"),))

    def test_dispatch_routes_targeted_events(self) -> None:
        self.assertTrue(self.sidebar.dispatch(PointerEvent(kind="pointer_move", x=5.0, y=5.0, target="bar")))
        self.assertEqual(self.controller.state.hover_label, "Bar Chart")
        self.assertTrue(self.sidebar.dispatch(PointerEvent(kind="click", target="bar")))
        self.assertEqual(self.controller.state.chart_kind, "bar")
        self.assertTrue(self.sidebar.dispatch(PointerEvent(kind="pointer_leave", target="bar")))
        self.assertEqual(self.controller.state.hover_label, "")
        self.assertFalse(self.sidebar.dispatch(PointerEvent(kind="click", x=1.0, y=1.0)))
        self.assertFalse(self.sidebar.dispatch(PointerEvent(kind="click", target="chart")))


if __name__ == "__main__":
    unittest.main()
