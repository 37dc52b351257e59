"""
Tray Denoiser - GUI Package

Bootstraps the Qt application: a tray icon only, no windows.
"""
import sys
from typing import Optional

from PyQt6.QtWidgets import QApplication, QSystemTrayIcon
from PyQt6.QtCore import QSharedMemory

from .system_tray import SystemTray
from ..constants import APP_NAME, APP_ORGANIZATION, SINGLE_INSTANCE_KEY, MSG_APP_READY
from ..control_surface import ControlSurface
from ..engine import EngineLoadError, load_engine
from ..session import EngineSessionController
from ..logging_config import get_logger

_logger = get_logger(__name__)

# Held for the lifetime of the process; released on detach or exit
_shared_memory: Optional[QSharedMemory] = None


def _is_already_running() -> bool:
    """Check if another instance is already running."""
    global _shared_memory

    _shared_memory = QSharedMemory(SINGLE_INSTANCE_KEY)

    if _shared_memory.attach():
        _logger.info("Detected existing instance via shared memory attachment.")
        _shared_memory.detach()
        return True

    # Create the segment to mark this instance as running
    if not _shared_memory.create(1):
        _logger.info("Failed to create shared memory segment - another instance likely exists.")
        return True

    return False


def _release_instance_lock() -> None:
    if _shared_memory is not None and _shared_memory.isAttached():
        _shared_memory.detach()


def run_tray(require_model: bool = False) -> None:
    """
    Start the tray application and run the Qt event loop.

    Args:
        require_model: Refuse to start a session when the model file is missing
    """
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_ORGANIZATION)
    # Tray-only app: closing windows must never end the process
    app.setQuitOnLastWindowClosed(False)

    if _is_already_running():
        _logger.info(f"{APP_NAME} is already running. Exiting.")
        sys.exit(0)

    try:
        engine = load_engine()
    except EngineLoadError:
        _release_instance_lock()
        sys.exit(1)

    controller = EngineSessionController(engine, require_model=require_model)
    surface = ControlSurface(controller, quit_callback=app.quit)

    if not QSystemTrayIcon.isSystemTrayAvailable():
        _logger.warning("System tray is not available on this desktop")

    tray = SystemTray(surface)
    controller.add_listener(tray.refresh)
    tray.show()

    app.aboutToQuit.connect(controller.shutdown)
    app.aboutToQuit.connect(_release_instance_lock)

    _logger.info(MSG_APP_READY)
    sys.exit(app.exec())


__all__ = ['SystemTray', 'run_tray']
