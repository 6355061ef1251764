"""Control models and pointer interaction contracts for the chart sidebar."""

from .button import ButtonModel, ButtonState
from .interaction import PointerEvent, PointerKind, PressPhase, parse_pointer_event

__all__ = [
    "ButtonModel",
    "ButtonState",
    "PointerEvent",
    "PointerKind",
    "PressPhase",
    "parse_pointer_event",
]
