"""
Sounddevice Engine

Captures the selected microphone with PortAudio, denoises each block in
the stream callback and plays the result on the default output device.
"""
import threading
import traceback
from typing import Optional

try:
    import sounddevice as sd
except (ImportError, OSError):
    # OSError: the PortAudio shared library itself is missing
    sd = None

from . import EngineCapability, EngineError
from .processor import EnergyGate, FrameDenoiser, load_onnx_model
from ..constants import (
    DEFAULT_SAMPLE_RATE,
    DEFAULT_FRAME_SIZE,
    DEFAULT_ATTEN_LIM_DB,
    DEFAULT_GATE_THRESHOLD_DB,
)
from ..logging_config import get_logger

_logger = get_logger(__name__)


class SoundDeviceEngine(EngineCapability):
    """
    Duplex sounddevice stream driving a FrameDenoiser.

    Device indexes are positions in the input-capable subset of
    sd.query_devices(), matching list_devices().
    """

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE,
                 frame_size: int = DEFAULT_FRAME_SIZE,
                 atten_lim_db: float = DEFAULT_ATTEN_LIM_DB,
                 gate_threshold_db: Optional[float] = DEFAULT_GATE_THRESHOLD_DB):
        """
        Args:
            sample_rate: Stream sample rate expected by the model
            frame_size: Samples per block / model frame
            atten_lim_db: Attenuation limit in dB
            gate_threshold_db: Energy gate threshold; None runs the model on every frame
        """
        if sd is None:
            raise EngineError("sounddevice is required")

        self.sample_rate = sample_rate
        self.frame_size = frame_size
        self.atten_lim_db = atten_lim_db
        self.gate_threshold_db = gate_threshold_db

        self._stream = None
        self._denoiser: Optional[FrameDenoiser] = None
        self._lock = threading.Lock()

    def _input_device_ids(self) -> list[int]:
        devices = sd.query_devices()
        return [i for i, device in enumerate(devices) if device['max_input_channels'] > 0]

    def list_devices(self) -> list[str]:
        devices = sd.query_devices()
        return [device['name'] for device in devices if device['max_input_channels'] > 0]

    @property
    def is_streaming(self) -> bool:
        return self._stream is not None

    def start(self, device_index: int, model_path: str) -> None:
        with self._lock:
            if self._stream is not None:
                raise EngineError("Engine is already running")

            device_ids = self._input_device_ids()
            if not 0 <= device_index < len(device_ids):
                raise EngineError(
                    f"Invalid input device index {device_index} "
                    f"({len(device_ids)} input devices available)"
                )

            gate = None
            if self.gate_threshold_db is not None:
                gate = EnergyGate(self.gate_threshold_db, sample_rate=self.sample_rate,
                                  frame_size=self.frame_size)
            self._denoiser = FrameDenoiser(
                load_onnx_model(model_path),
                frame_size=self.frame_size,
                atten_lim_db=self.atten_lim_db,
                gate=gate,
            )

            device_id = device_ids[device_index]
            _logger.info(f"Opening input device ID {device_id} at {self.sample_rate}Hz")

            try:
                stream = sd.Stream(
                    device=(device_id, None),
                    samplerate=self.sample_rate,
                    blocksize=self.frame_size,
                    channels=1,
                    dtype='float32',
                    callback=self._callback,
                )
            except sd.PortAudioError as e:
                self._denoiser = None
                raise EngineError(f"Failed to open audio stream: {e}") from e

            try:
                stream.start()
            except sd.PortAudioError as e:
                stream.close(ignore_errors=True)
                self._denoiser = None
                raise EngineError(f"Failed to start audio stream: {e}") from e

            self._stream = stream

    def _callback(self, indata, outdata, frames, time_info, status) -> None:
        if status:
            _logger.debug(f"Stream status: {status}")
        try:
            outdata[:, 0] = self._denoiser.process_frame(indata[:, 0])[:frames]
        except Exception:
            # Never let an exception escape into PortAudio's thread
            _logger.debug(traceback.format_exc())
            outdata.fill(0)

    def stop(self) -> None:
        with self._lock:
            if self._stream is None:
                return

            # Raise on PortAudio errors; the stream is only forgotten once stopped
            self._stream.stop(ignore_errors=False)
            self._stream.close(ignore_errors=False)
            self._stream = None

            if self._denoiser is not None:
                stats = self._denoiser.get_stats()
                _logger.info(
                    f"Processed {stats['frame_count']} frames "
                    f"(avg {stats['avg_time_ms']:.2f}ms)"
                )
                self._denoiser = None


__all__ = ['SoundDeviceEngine', 'sd']
