"""
Model Asset Locator

Resolves the absolute path of the packaged denoiser model and checks that
it is present. Works both in development and in PyInstaller/Nuitka bundles.
"""
import os
import sys
from dataclasses import dataclass
from typing import Optional

from .constants import MODEL_RELATIVE_PATH, MSG_MODEL_NOT_FOUND
from .logging_config import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class ModelAsset:
    """Resolved model location and whether it existed when resolved."""

    path: str
    present: bool


def get_install_root() -> str:
    """
    Get the directory the application's resources are installed under.
    
    When bundled, resources live in sys._MEIPASS (one-file mode) or next to
    the executable (one-folder mode). When running from source, the install
    root is the directory containing the package.
    """
    if getattr(sys, 'frozen', False):
        if hasattr(sys, '_MEIPASS'):
            return sys._MEIPASS
        return os.path.dirname(sys.executable)
    
    package_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.dirname(package_dir)


class ModelLocator:
    """Builds a fresh ModelAsset on every resolve; nothing is cached."""

    def __init__(self, install_root: Optional[str] = None,
                 relative_path: str = MODEL_RELATIVE_PATH):
        self._install_root = install_root
        self._relative_path = relative_path

    @property
    def install_root(self) -> str:
        return self._install_root or get_install_root()

    def resolve(self) -> ModelAsset:
        """Resolve the model path and record whether the file exists."""
        path = os.path.abspath(os.path.join(self.install_root, self._relative_path))
        present = os.path.exists(path)
        
        _logger.info(f"Using model: {path}")
        _logger.info(f"Model exists: {present}")
        if not present:
            _logger.warning(MSG_MODEL_NOT_FOUND.format(path))
        
        return ModelAsset(path=path, present=present)
