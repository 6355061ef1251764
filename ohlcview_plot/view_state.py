from __future__ import annotations

import dataclasses
from dataclasses import dataclass
import logging
from typing import Callable

from ohlcview_plot.renderers import chart_kinds

LOGGER = logging.getLogger(__name__)

DEFAULT_CHART_KIND = "line"


@dataclass(frozen=True)
class ViewState:
    chart_kind: str = DEFAULT_CHART_KIND
    grid_visible: bool = False
    hover_label: str = ""


ViewStateListener = Callable[[ViewState], None]


class ViewStateController:
    """Owns the view toggles; every effective change notifies subscribers.

    Re-applying the current value is a no-op, so callers may invoke the setters
    repeatedly without triggering extra renders.
    """

    def __init__(self, initial: ViewState | None = None) -> None:
        state = initial or ViewState()
        _require_known_kind(state.chart_kind)
        self._state = state
        self._listeners: list[ViewStateListener] = []

    @property
    def state(self) -> ViewState:
        return self._state

    def subscribe(self, listener: ViewStateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_chart_kind(self, kind: str) -> ViewState:
        _require_known_kind(kind)
        return self._apply(chart_kind=kind)

    def toggle_grid(self) -> ViewState:
        return self._apply(grid_visible=not self._state.grid_visible)

    def set_grid_visible(self, visible: bool) -> ViewState:
        return self._apply(grid_visible=bool(visible))

    def set_hover_label(self, text: str | None) -> ViewState:
        return self._apply(hover_label=text or "")

    def _apply(self, **changes: object) -> ViewState:
        updated = dataclasses.replace(self._state, **changes)
        if updated == self._state:
            return self._state
        self._state = updated
        for listener in list(self._listeners):
            try:
                listener(updated)
            except Exception:  # noqa: BLE001
                LOGGER.exception("view state listener failed")
        return updated


def _require_known_kind(kind: str) -> None:
    if kind not in chart_kinds():
        raise ValueError(f"unsupported chart kind: {kind!r} (expected one of: {', '.join(chart_kinds())})")
