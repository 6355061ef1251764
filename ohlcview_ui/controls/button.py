from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .interaction import PressPhase


ButtonState = Literal["idle", "hover", "pressed", "disabled"]


@dataclass
class ButtonModel:
    """Sidebar button state driven by pointer hover and press signals."""

    disabled: bool = False
    hovered: bool = False
    state: ButtonState = "idle"

    def __post_init__(self) -> None:
        self._sync_state()

    def set_disabled(self, disabled: bool) -> ButtonState:
        self.disabled = disabled
        self._sync_state()
        return self.state

    def set_hovered(self, hovered: bool) -> ButtonState:
        self.hovered = hovered
        self._sync_state()
        return self.state

    def on_press(self, phase: PressPhase) -> bool:
        """Advance on a press phase; True when the press completes as a click."""
        if self.disabled:
            self.state = "disabled"
            return False
        if phase == "down":
            self.state = "pressed"
            return False
        fired = phase == "up" and self.state == "pressed"
        self._sync_state()
        return fired

    def _sync_state(self) -> None:
        if self.disabled:
            self.state = "disabled"
        elif self.hovered:
            self.state = "hover"
        else:
            self.state = "idle"
