"""
Frame Denoiser

Streaming ONNX inference on fixed-size microphone frames, with an energy
gate that lets quiet frames through untouched.
"""
import os
import time
from typing import Any, Optional

import numpy as np
import onnxruntime

from ..constants import (
    DEFAULT_FRAME_SIZE,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_ATTEN_LIM_DB,
    DEFAULT_GATE_THRESHOLD_DB,
    DEFAULT_GATE_HANG_TIME_MS,
    ONNX_STATE_SIZE,
    ONNX_INTRA_OP_THREADS,
    ONNX_INTER_OP_THREADS,
    SOFT_LIMITER_THRESHOLD,
    AUDIO_CLIP_MIN,
    AUDIO_CLIP_MAX,
    MSG_MODEL_NOT_FOUND,
)
from ..logging_config import get_logger

_logger = get_logger(__name__)


class EnergyGate:
    """
    RMS energy gate deciding which frames need inference.

    Keeps a frame open for a hang time after the last loud frame so
    word endings are not chopped.
    """

    def __init__(self, threshold_db: float = DEFAULT_GATE_THRESHOLD_DB,
                 hang_time_ms: float = DEFAULT_GATE_HANG_TIME_MS,
                 sample_rate: int = DEFAULT_SAMPLE_RATE,
                 frame_size: int = DEFAULT_FRAME_SIZE):
        self.threshold_linear = 10 ** (threshold_db / 20)
        self.hang_frames = int(hang_time_ms * sample_rate / 1000 / frame_size)
        self.frames_since_active = self.hang_frames + 1
        self.total_frames = 0
        self.bypassed_frames = 0

    def is_open(self, frame: np.ndarray) -> bool:
        self.total_frames += 1
        rms = np.sqrt(np.mean(frame ** 2))

        if rms > self.threshold_linear:
            self.frames_since_active = 0
            return True

        self.frames_since_active += 1
        if self.frames_since_active < self.hang_frames:
            return True
        self.bypassed_frames += 1
        return False

    @property
    def bypass_ratio(self) -> float:
        if self.total_frames == 0:
            return 0.0
        return self.bypassed_frames / self.total_frames


class FrameDenoiser:
    """
    Runs the streaming denoiser model one frame at a time.

    The model carries its recurrent state between calls through the
    'states' input/output pair.
    """

    def __init__(self, onnx_session: Any,
                 frame_size: int = DEFAULT_FRAME_SIZE,
                 atten_lim_db: float = DEFAULT_ATTEN_LIM_DB,
                 gate: Optional[EnergyGate] = None):
        """
        Args:
            onnx_session: ONNX Runtime inference session (or anything with a compatible run())
            frame_size: Samples per frame (default: 480, 10ms at 48kHz)
            atten_lim_db: Attenuation limit in dB passed to the model
            gate: Energy gate; None disables gating
        """
        self.onnx_session = onnx_session
        self.frame_size = frame_size
        self.atten_lim_db = np.array(atten_lim_db, dtype=np.float32)
        self.gate = gate

        self.states = np.zeros([ONNX_STATE_SIZE], dtype=np.float32)
        self.frame_count = 0
        self.total_processing_time = 0.0

    def _fit(self, audio: np.ndarray) -> np.ndarray:
        """Pad with zeros or truncate to exactly frame_size samples."""
        audio = audio.flatten().astype(np.float32)
        if len(audio) < self.frame_size:
            return np.pad(audio, (0, self.frame_size - len(audio)), mode='constant')
        return audio[:self.frame_size]

    def process_frame(self, frame: np.ndarray) -> np.ndarray:
        """
        Denoise one frame.

        Args:
            frame: Mono float32 samples

        Returns:
            frame_size denoised samples (or the input itself while the gate is closed)
        """
        frame = self._fit(frame)

        if self.gate is not None and not self.gate.is_open(frame):
            return frame

        start_time = time.perf_counter()
        outputs = self.onnx_session.run(
            [],
            {
                'input_frame': frame,
                'states': self.states,
                'atten_lim_db': self.atten_lim_db,
            }
        )
        self.total_processing_time += (time.perf_counter() - start_time) * 1000
        self.frame_count += 1

        enhanced, new_states = outputs[0], outputs[1]
        self.states = np.asarray(new_states, dtype=np.float32).copy()

        if enhanced.size == 0:
            return frame
        return self._postprocess(self._fit(enhanced))

    def _postprocess(self, audio: np.ndarray) -> np.ndarray:
        """Soft-limit, clip and remove DC offset."""
        peak = np.max(np.abs(audio))
        if peak > SOFT_LIMITER_THRESHOLD:
            audio = audio * (SOFT_LIMITER_THRESHOLD / peak)

        audio = np.clip(audio, AUDIO_CLIP_MIN, AUDIO_CLIP_MAX)
        return (audio - np.mean(audio)).astype(np.float32)

    def get_stats(self) -> dict:
        stats = {
            'frame_count': self.frame_count,
            'avg_time_ms': 0.0,
        }
        if self.frame_count > 0:
            stats['avg_time_ms'] = self.total_processing_time / self.frame_count
        if self.gate is not None:
            stats['gate_bypass_ratio'] = self.gate.bypass_ratio
        return stats


def load_onnx_model(model_path: str) -> onnxruntime.InferenceSession:
    """
    Load the ONNX model for inference with optimized settings.
    Uses the CPU execution provider with a small intra-op thread pool.

    Raises:
        FileNotFoundError: If model_path does not exist
    """
    if not os.path.exists(model_path):
        raise FileNotFoundError(MSG_MODEL_NOT_FOUND.format(model_path))

    _logger.info(f"Loading ONNX model: {model_path}")

    session_options = onnxruntime.SessionOptions()
    session_options.graph_optimization_level = onnxruntime.GraphOptimizationLevel.ORT_ENABLE_ALL
    # Small model: fewer threads means less scheduling overhead per frame
    session_options.intra_op_num_threads = ONNX_INTRA_OP_THREADS
    session_options.inter_op_num_threads = ONNX_INTER_OP_THREADS
    session_options.enable_mem_pattern = True
    session_options.enable_cpu_mem_arena = True

    providers = [
        ('CPUExecutionProvider', {
            'arena_extend_strategy': 'kSameAsRequested',
        })
    ]

    session = onnxruntime.InferenceSession(
        model_path,
        sess_options=session_options,
        providers=providers
    )

    _logger.debug(f"  Intra-op threads: {session_options.intra_op_num_threads}")
    _logger.debug(f"  Inter-op threads: {session_options.inter_op_num_threads}")
    return session
