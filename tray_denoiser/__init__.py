"""
Tray Denoiser Package

Background noise cancellation controlled from a system tray icon.

Features:
- Picks a physical microphone, skipping virtual routing devices (BlackHole)
- Resolves the packaged ONNX denoiser model at start time
- Idempotent start/stop session lifecycle with recoverable failures
- Tray menu whose entries enable/disable with the session state

The GUI and the audio engine are imported on demand so the core stays
importable without Qt or PortAudio.
"""

from .constants import (
    DEFAULT_SAMPLE_RATE,
    DEFAULT_FRAME_SIZE,
    VIRTUAL_DEVICE_MARKER,
)
from .device_selection import select_input_device
from .model_locator import ModelAsset, ModelLocator, get_install_root
from .engine import EngineCapability, EngineError, EngineLoadError, load_engine
from .session import EngineSession, EngineSessionController, SessionState
from .control_surface import ControlSurface, SurfaceAction

__version__ = "1.0.0"

__all__ = [
    # Constants
    "DEFAULT_SAMPLE_RATE",
    "DEFAULT_FRAME_SIZE",
    "VIRTUAL_DEVICE_MARKER",
    # Classes
    "ModelAsset",
    "ModelLocator",
    "EngineCapability",
    "EngineError",
    "EngineLoadError",
    "EngineSession",
    "EngineSessionController",
    "SessionState",
    "ControlSurface",
    "SurfaceAction",
    # Functions
    "select_input_device",
    "get_install_root",
    "load_engine",
]
