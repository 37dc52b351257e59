"""
Tray Denoiser Constants

Central location for all configuration constants used across the package.
"""
import os

# Audio stream constants
DEFAULT_SAMPLE_RATE = 48000
DEFAULT_FRAME_SIZE = 480

# ONNX model constants
ONNX_STATE_SIZE = 45304
ONNX_INTRA_OP_THREADS = 2
ONNX_INTER_OP_THREADS = 1
DEFAULT_ATTEN_LIM_DB = -60.0

# Energy gate constants
DEFAULT_GATE_THRESHOLD_DB = -40.0
DEFAULT_GATE_HANG_TIME_MS = 300.0

# Post-processing constants
SOFT_LIMITER_THRESHOLD = 0.98
AUDIO_CLIP_MIN = -1.0
AUDIO_CLIP_MAX = 1.0

# Model asset location, relative to the install root
MODEL_RELATIVE_PATH = os.path.join("models", "denoiser_model.onnx")

# Virtual audio-routing devices never picked as the default microphone
VIRTUAL_DEVICE_MARKER = "blackhole"

# Tray / control surface
APP_NAME = "Tray Denoiser"
APP_ORGANIZATION = "TrayDenoiser"
SINGLE_INSTANCE_KEY = "traydenoiser.singleinstance"
TRAY_TOOLTIP = "Noise Cancellation"
LABEL_START = "Start Noise Cancellation"
LABEL_STOP = "Stop Noise Cancellation"
LABEL_QUIT = "Quit"

# Shared Messages
MSG_ENGINE_LOADED = "Native engine loaded"
MSG_ENGINE_LOAD_FAILED = "Failed to load native engine: {}"
MSG_ENGINE_STARTED = "Noise cancellation engine started successfully"
MSG_ENGINE_STOPPED = "Noise cancellation engine stopped"
MSG_START_FAILED = "Failed to start engine: {}"
MSG_STOP_FAILED = "Failed to stop engine: {}"
MSG_MODEL_NOT_FOUND = "ONNX model not found: {}"
MSG_NO_INPUT_DEVICES = "No input devices reported by the engine"
MSG_APP_READY = "Application ready - check system tray for icon"
