"""
Control Surface

The user-facing actions of the tray menu. Availability is always derived
from the controller's current state, never stored.
"""
from dataclasses import dataclass
from typing import Callable

from .constants import LABEL_START, LABEL_STOP, LABEL_QUIT, TRAY_TOOLTIP
from .session import EngineSessionController


@dataclass(frozen=True)
class SurfaceAction:
    """A labelled menu entry with a click handler and a live enabled predicate."""

    label: str
    trigger: Callable[[], object]
    is_enabled: Callable[[], bool]


class ControlSurface:
    """
    Exposes start/stop of noise cancellation plus quit.

    Start is only available while idle, stop only while running.
    """

    quit_label = LABEL_QUIT

    def __init__(self, controller: EngineSessionController, quit_callback: Callable[[], None]):
        self._controller = controller
        self._quit_callback = quit_callback

    def can_start(self) -> bool:
        return not self._controller.is_running

    def can_stop(self) -> bool:
        return self._controller.is_running

    def start(self) -> bool:
        return self._controller.start()

    def stop(self) -> bool:
        return self._controller.stop()

    def quit(self) -> None:
        self._quit_callback()

    def actions(self) -> list[SurfaceAction]:
        return [
            SurfaceAction(LABEL_START, self.start, self.can_start),
            SurfaceAction(LABEL_STOP, self.stop, self.can_stop),
        ]

    def tooltip(self) -> str:
        state = "Running" if self._controller.is_running else "Idle"
        return f"{TRAY_TOOLTIP} ({state})"
