from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
import logging
from typing import Callable, Union

from ohlcview_plot.records import PriceRecord
from ohlcview_plot.scene import HoverTarget, Scene

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoverEvent:
    """Published when the pointer enters a hoverable shape."""

    record: PriceRecord
    pointer_x: float
    pointer_y: float
    chart_kind: str | None = None
    index: int = 0

    @property
    def date(self) -> dt.date:
        return self.record.date

    @property
    def close(self) -> float:
        return self.record.close

    @property
    def open(self) -> float | None:
        if self.chart_kind == "candlestick":
            return self.record.open
        return None


@dataclass(frozen=True)
class HoverClear:
    """Published when the pointer leaves the active shape."""


HoverMessage = Union[HoverEvent, HoverClear]
HoverListener = Callable[[HoverMessage], None]


def hit_test(scene: Scene, x: float, y: float) -> HoverTarget | None:
    # Later targets are drawn on top.
    for target in reversed(scene.hover_targets):
        if target.contains(x, y):
            return target
    return None


def format_price(value: float) -> str:
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_tooltip(event: HoverEvent) -> str:
    day = event.date.isoformat()
    if event.chart_kind == "candlestick":
        return f"{day}: open {format_price(event.record.open)}, close {format_price(event.close)}"
    return f"{day}: {format_price(event.close)}"


class HoverTracker:
    """Turns raw pointer positions into enter/leave notifications for one scene.

    Only the latest transition matters: listeners are invoked synchronously and
    nothing is buffered.
    """

    def __init__(self, scene: Scene | None = None) -> None:
        self._scene = scene if scene is not None else Scene.empty(0, 0)
        self._active: HoverTarget | None = None
        self._listeners: list[HoverListener] = []

    @property
    def scene(self) -> Scene:
        return self._scene

    @property
    def active(self) -> HoverTarget | None:
        return self._active

    def subscribe(self, listener: HoverListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def bind(self, scene: Scene) -> None:
        """Switch to a freshly composed scene; any hover on the old one is cleared."""
        self._scene = scene
        if self._active is not None:
            self._active = None
            self._publish(HoverClear())

    def pointer_move(self, x: float, y: float) -> HoverTarget | None:
        target = hit_test(self._scene, x, y)
        if target is None:
            self.pointer_leave()
            return None
        if self._active is not None and self._active.index == target.index:
            return target
        if self._active is not None:
            self._publish(HoverClear())
        self._active = target
        self._publish(
            HoverEvent(
                record=target.record,
                pointer_x=float(x),
                pointer_y=float(y),
                chart_kind=self._scene.chart_kind,
                index=target.index,
            )
        )
        return target

    def pointer_leave(self) -> None:
        if self._active is None:
            return
        self._active = None
        self._publish(HoverClear())

    def _publish(self, message: HoverMessage) -> None:
        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception:  # noqa: BLE001
                LOGGER.exception("hover listener failed for %s", type(message).__name__)
