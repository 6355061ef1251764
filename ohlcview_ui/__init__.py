"""Sidebar controls and tooltip models for ohlcview charts."""

from .controls.button import ButtonModel, ButtonState
from .controls.interaction import PointerEvent, PointerKind, PressPhase, parse_pointer_event
from .sidebar import SIDEBAR_BUTTONS, Sidebar, SidebarButton
from .tooltip import TOOLTIP_OFFSET, TooltipModel

__all__ = [
    "ButtonModel",
    "ButtonState",
    "PointerEvent",
    "PointerKind",
    "PressPhase",
    "SIDEBAR_BUTTONS",
    "Sidebar",
    "SidebarButton",
    "TOOLTIP_OFFSET",
    "TooltipModel",
    "parse_pointer_event",
]
