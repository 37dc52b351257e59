"""
Tray Denoiser - System Tray

System tray icon rendering the control surface as a context menu.
"""
import os

from PyQt6.QtWidgets import QSystemTrayIcon, QMenu
from PyQt6.QtGui import QIcon, QAction

from ..control_surface import ControlSurface, SurfaceAction
from ..logging_config import get_logger

_logger = get_logger(__name__)

ICON_PATH = os.path.join(os.path.dirname(__file__), "assets", "icon.png")


def load_tray_icon() -> QIcon:
    """Packaged tray icon, or the theme microphone icon if the asset is missing."""
    if os.path.exists(ICON_PATH):
        return QIcon(ICON_PATH)
    _logger.warning(f"Tray icon not found at {ICON_PATH}, using theme icon")
    return QIcon.fromTheme("audio-input-microphone")


class SystemTray(QSystemTrayIcon):
    """
    Tray icon whose menu mirrors a ControlSurface.

    Enabled states are re-read from the surface whenever the menu is about
    to open and after every action, so they never go stale.
    """

    def __init__(self, surface: ControlSurface, parent=None):
        super().__init__(parent)
        self._surface = surface
        self._entries: list[tuple[QAction, SurfaceAction]] = []

        self.setIcon(load_tray_icon())

        self._setup_menu()
        self.refresh()

    def _setup_menu(self):
        """Create context menu."""
        # QSystemTrayIcon does not take ownership of the menu
        self._menu = QMenu()

        for surface_action in self._surface.actions():
            action = QAction(surface_action.label, self._menu)
            action.triggered.connect(
                lambda _checked=False, entry=surface_action: self._on_triggered(entry)
            )
            self._menu.addAction(action)
            self._entries.append((action, surface_action))

        self._menu.addSeparator()

        self._quit_action = QAction(self._surface.quit_label, self._menu)
        self._quit_action.triggered.connect(self._surface.quit)
        self._menu.addAction(self._quit_action)

        self._menu.aboutToShow.connect(self.refresh)
        self.setContextMenu(self._menu)

    def _on_triggered(self, entry: SurfaceAction):
        _logger.debug(f"Menu action: {entry.label}")
        entry.trigger()
        self.refresh()

    def refresh(self, *_args):
        """Re-derive enabled states and tooltip from the surface."""
        for action, surface_action in self._entries:
            action.setEnabled(surface_action.is_enabled())
        self.setToolTip(self._surface.tooltip())

    def menu_actions(self) -> list[QAction]:
        """Menu entries in display order (separator excluded)."""
        return [action for action, _ in self._entries] + [self._quit_action]
