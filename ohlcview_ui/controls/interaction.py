from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal, Mapping


PointerKind = Literal["pointer_move", "pointer_leave", "click"]
PressPhase = Literal["down", "up", "cancel"]

_POINTER_KINDS = frozenset({"pointer_move", "pointer_leave", "click"})


@dataclass(frozen=True)
class PointerEvent:
    """Typed pointer interaction, consumed by `ChartEngine.dispatch` and `Sidebar.dispatch`."""

    kind: PointerKind
    x: float | None = None
    y: float | None = None
    target: str | None = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


def parse_pointer_event(event_type: str, payload: object) -> PointerEvent | None:
    """Parse a raw host event into a `PointerEvent`.

    `pointer_move` needs finite `x`/`y`; `click` needs either a position or a
    `target` control id; `pointer_leave` carries no position. Anything else,
    including non-mapping payloads, yields None.
    """

    if event_type not in _POINTER_KINDS:
        return None
    if payload is None and event_type == "pointer_leave":
        return PointerEvent(kind="pointer_leave")
    if not isinstance(payload, Mapping):
        return None
    raw_target = payload.get("target")
    target = None if raw_target is None else str(raw_target)
    if event_type == "pointer_leave":
        return PointerEvent(kind="pointer_leave", target=target)
    x = _coerce_coord(payload.get("x"))
    y = _coerce_coord(payload.get("y"))
    if x is None or y is None:
        if event_type == "click" and target is not None:
            return PointerEvent(kind="click", target=target)
        return None
    return PointerEvent(kind=event_type, x=x, y=y, target=target)


def _coerce_coord(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    out = float(value)
    if not math.isfinite(out):
        return None
    return out
