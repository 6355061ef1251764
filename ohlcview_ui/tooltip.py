from __future__ import annotations

from dataclasses import dataclass

from ohlcview_plot.hover import HoverClear, HoverEvent, HoverMessage, HoverTracker, format_tooltip
from ohlcview_plot.raster import text_size

TOOLTIP_OFFSET = 10.0
TOOLTIP_PADDING = 5.0


@dataclass
class TooltipModel:
    """Tooltip box that follows hover notifications.

    The box sits at the pointer plus a fixed offset and is clamped so it stays
    inside the viewport.
    """

    viewport_width: float
    viewport_height: float
    offset: float = TOOLTIP_OFFSET
    padding: float = TOOLTIP_PADDING
    font_size_px: float = 12.0
    visible: bool = False
    text: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def __post_init__(self) -> None:
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError("viewport dimensions must be > 0")

    def attach(self, tracker: HoverTracker):
        return tracker.subscribe(self.handle)

    def handle(self, message: HoverMessage) -> None:
        if isinstance(message, HoverClear):
            self.hide()
        elif isinstance(message, HoverEvent):
            self.show(message)

    def show(self, event: HoverEvent) -> None:
        self.text = format_tooltip(event)
        text_w, text_h = text_size(self.text, font_size_px=self.font_size_px)
        self.width = text_w + 2 * self.padding
        self.height = text_h + 2 * self.padding
        self.x = _clamp(event.pointer_x + self.offset, 0.0, self.viewport_width - self.width)
        self.y = _clamp(event.pointer_y + self.offset, 0.0, self.viewport_height - self.height)
        self.visible = True

    def hide(self) -> None:
        self.visible = False
        self.text = ""


def _clamp(value: float, lo: float, hi: float) -> float:
    if hi < lo:
        return lo
    return max(lo, min(hi, value))
