"""
Engine Session Controller

Owns the single noise-cancellation session and drives the engine through
its start/stop lifecycle.
"""
import threading
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from .constants import (
    MSG_ENGINE_STARTED,
    MSG_ENGINE_STOPPED,
    MSG_START_FAILED,
    MSG_STOP_FAILED,
    MSG_MODEL_NOT_FOUND,
    MSG_NO_INPUT_DEVICES,
)
from .device_selection import select_input_device
from .engine import EngineCapability
from .model_locator import ModelLocator
from .logging_config import get_logger

_logger = get_logger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class EngineSession:
    """Snapshot of the session. Device and model are only set while running."""

    state: SessionState = SessionState.IDLE
    mic_index: Optional[int] = None
    model_path: Optional[str] = None


class EngineSessionController:
    """
    Two-state machine (idle/running) around an engine capability.

    start() and stop() are idempotent: calling start() while running or
    stop() while idle never reaches the engine. Engine failures are logged
    and leave the state untouched, so the same action can be retried.
    """

    def __init__(self, engine: EngineCapability,
                 locator: Optional[ModelLocator] = None,
                 select_device: Callable[[Sequence[str]], int] = select_input_device,
                 require_model: bool = False):
        """
        Args:
            engine: Engine capability to drive
            locator: Model locator (default: packaged model under the install root)
            select_device: Picks the device index from the engine's device names
            require_model: Treat a missing model file as a start failure
                instead of letting the engine attempt it
        """
        self._engine = engine
        self._locator = locator or ModelLocator()
        self._select_device = select_device
        self._require_model = require_model

        self._session = EngineSession()
        self._lock = threading.Lock()
        self._listeners: list[Callable[[EngineSession], None]] = []

    @property
    def session(self) -> EngineSession:
        return self._session

    @property
    def is_running(self) -> bool:
        return self._session.state is SessionState.RUNNING

    def add_listener(self, callback: Callable[[EngineSession], None]) -> None:
        """Register a callback invoked with the new snapshot after each transition."""
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in self._listeners:
            callback(self._session)

    def start(self) -> bool:
        """
        Start noise cancellation.

        Selects the microphone, resolves the model and starts the engine.

        Returns:
            True if the session is running after the call
        """
        with self._lock:
            if self.is_running:
                _logger.debug("Start requested while already running - ignoring")
                return True

            try:
                devices = list(self._engine.list_devices())
                _logger.info(f"Input devices: {devices}")
                if not devices:
                    _logger.warning(MSG_NO_INPUT_DEVICES)
                mic_index = self._select_device(devices)
                _logger.info(f"Using mic index: {mic_index}")

                asset = self._locator.resolve()
                if self._require_model and not asset.present:
                    raise FileNotFoundError(MSG_MODEL_NOT_FOUND.format(asset.path))

                self._engine.start(mic_index, asset.path)
            except Exception as e:
                _logger.error(MSG_START_FAILED.format(e))
                _logger.debug(traceback.format_exc())
                return False

            self._session = EngineSession(SessionState.RUNNING, mic_index, asset.path)

        _logger.info(MSG_ENGINE_STARTED)
        self._notify()
        return True

    def stop(self) -> bool:
        """
        Stop noise cancellation.

        A failed stop leaves the session marked as running, since the engine
        may still hold the microphone.

        Returns:
            True if the session is idle after the call
        """
        with self._lock:
            if not self.is_running:
                _logger.debug("Stop requested while idle - ignoring")
                return True

            try:
                self._engine.stop()
            except Exception as e:
                _logger.error(MSG_STOP_FAILED.format(e))
                _logger.debug(traceback.format_exc())
                return False

            self._session = EngineSession()

        _logger.info(MSG_ENGINE_STOPPED)
        self._notify()
        return True

    def shutdown(self) -> None:
        """Process exit hook: stop the session if one is running."""
        if self.is_running:
            _logger.info("Stopping engine before exit...")
            self.stop()
