from __future__ import annotations

from dataclasses import dataclass
import logging

from ohlcview_plot.view_state import ViewState, ViewStateController

from .controls.button import ButtonModel, ButtonState
from .controls.interaction import PointerEvent

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SidebarButton:
    id: str
    label: str
    chart_kind: str | None = None

    @property
    def toggles_grid(self) -> bool:
        return self.chart_kind is None


SIDEBAR_BUTTONS: tuple[SidebarButton, ...] = (
    SidebarButton(id="line", label="Line Chart", chart_kind="line"),
    SidebarButton(id="bar", label="Bar Chart", chart_kind="bar"),
    SidebarButton(id="candlestick", label="Candlestick Chart", chart_kind="candlestick"),
    SidebarButton(id="grid", label="Toggle grid"),
)


class Sidebar:
    """Toggle controls feeding a `ViewStateController`.

    Hovering a button publishes its label as the hover label; clicking selects a
    chart kind or flips grid visibility.
    """

    def __init__(self, controller: ViewStateController, buttons: tuple[SidebarButton, ...] = SIDEBAR_BUTTONS) -> None:
        ids = [b.id for b in buttons]
        if len(set(ids)) != len(ids):
            raise ValueError("sidebar button ids must be unique")
        self._controller = controller
        self._buttons = {b.id: b for b in buttons}
        self._models = {b.id: ButtonModel() for b in buttons}

    @property
    def buttons(self) -> tuple[SidebarButton, ...]:
        return tuple(self._buttons.values())

    @property
    def controller(self) -> ViewStateController:
        return self._controller

    def button(self, button_id: str) -> SidebarButton:
        try:
            return self._buttons[button_id]
        except KeyError:
            raise ValueError(f"unknown sidebar button: {button_id!r}") from None

    def button_state(self, button_id: str) -> ButtonState:
        self.button(button_id)
        return self._models[button_id].state

    def set_disabled(self, button_id: str, disabled: bool) -> ButtonState:
        self.button(button_id)
        return self._models[button_id].set_disabled(disabled)

    def pointer_enter(self, button_id: str) -> ViewState:
        button = self.button(button_id)
        self._models[button_id].set_hovered(True)
        return self._controller.set_hover_label(button.label)

    def pointer_leave(self, button_id: str) -> ViewState:
        button = self.button(button_id)
        self._models[button_id].set_hovered(False)
        # Another button may already own the label.
        if self._controller.state.hover_label == button.label:
            return self._controller.set_hover_label(None)
        return self._controller.state

    def click(self, button_id: str) -> ViewState:
        button = self.button(button_id)
        model = self._models[button_id]
        model.on_press("down")
        if not model.on_press("up"):
            LOGGER.debug("click on disabled sidebar button %s ignored", button_id)
            return self._controller.state
        if button.toggles_grid:
            return self._controller.toggle_grid()
        return self._controller.set_chart_kind(button.chart_kind)

    def active_ids(self) -> tuple[str, ...]:
        state = self._controller.state
        active = []
        for button in self._buttons.values():
            if button.toggles_grid:
                if state.grid_visible:
                    active.append(button.id)
            elif button.chart_kind == state.chart_kind:
                active.append(button.id)
        return tuple(active)

    def dispatch(self, event: PointerEvent) -> bool:
        """Route a targeted pointer event; False when it is not for this sidebar."""
        if event.target is None or event.target not in self._buttons:
            return False
        if event.kind == "pointer_move":
            if self._models[event.target].hovered:
                return True
            self.pointer_enter(event.target)
        elif event.kind == "pointer_leave":
            self.pointer_leave(event.target)
        else:
            self.click(event.target)
        return True
