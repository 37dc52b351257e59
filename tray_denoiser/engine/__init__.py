"""
Noise Suppression Engine

Defines the capability the session controller drives, its error types,
and the loader for the concrete sounddevice/ONNX implementation.
"""
from abc import ABC, abstractmethod

from ..constants import MSG_ENGINE_LOADED, MSG_ENGINE_LOAD_FAILED
from ..logging_config import get_logger

_logger = get_logger(__name__)


class EngineError(RuntimeError):
    """Raised when the engine rejects or fails an operation."""


class EngineLoadError(EngineError):
    """Raised when the engine cannot be obtained at all."""


class EngineCapability(ABC):
    """
    Real-time capture and noise-suppression engine.
    
    Implementations signal failure by raising; a call that returns
    normally succeeded.
    """

    @abstractmethod
    def list_devices(self) -> list[str]:
        """Return input device names; positions are the indexes start() accepts."""

    @abstractmethod
    def start(self, device_index: int, model_path: str) -> None:
        """
        Start capturing from a device and denoising with a model.
        
        Args:
            device_index: Position in the list returned by list_devices()
            model_path: Absolute path to the model file
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop processing and release the microphone."""


def load_engine() -> EngineCapability:
    """
    Load the native audio engine.
    
    Raises:
        EngineLoadError: If the audio or inference libraries are unavailable
    """
    try:
        from .sounddevice_engine import SoundDeviceEngine, sd
    except ImportError as e:
        _logger.error(MSG_ENGINE_LOAD_FAILED.format(e))
        raise EngineLoadError(MSG_ENGINE_LOAD_FAILED.format(e)) from e
    
    if sd is None:
        message = MSG_ENGINE_LOAD_FAILED.format("sounddevice/PortAudio not available")
        _logger.error(message)
        raise EngineLoadError(message)
    
    engine = SoundDeviceEngine()
    _logger.info(MSG_ENGINE_LOADED)
    return engine


__all__ = ['EngineCapability', 'EngineError', 'EngineLoadError', 'load_engine']
