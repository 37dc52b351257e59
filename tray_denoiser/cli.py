"""
Command-Line Interface for Tray Denoiser

Parses flags, then either lists input devices or launches the tray app.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from .device_selection import select_input_device
from .engine import EngineLoadError, load_engine
from .logging_config import get_logger, set_log_level

_logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tray-denoiser',
        description='Real-time microphone noise cancellation from the system tray'
    )
    parser.add_argument('--list-devices', action='store_true',
                        help='List input devices, mark the default pick, and exit')
    parser.add_argument('--require-model', action='store_true',
                        help='Refuse to start when the model file is missing')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    return parser


def list_devices() -> int:
    """Print input devices with the one the selector would pick marked."""
    try:
        engine = load_engine()
    except EngineLoadError:
        return 1

    devices = engine.list_devices()
    if not devices:
        print("No input devices found")
        return 0

    selected = select_input_device(devices)
    print("Input Devices:")
    print("=" * 60)
    for i, name in enumerate(devices):
        marker = " [DEFAULT]" if i == selected else ""
        print(f"ID {i}: {name}{marker}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    set_log_level(logging.DEBUG if args.verbose else logging.INFO)

    if args.list_devices:
        sys.exit(list_devices())

    try:
        from .gui import run_tray
    except ImportError as e:
        _logger.error(f"Failed to import GUI: {e}")
        _logger.error("Make sure PyQt6 is installed: pip install PyQt6")
        sys.exit(1)

    run_tray(require_model=args.require_model)


if __name__ == "__main__":
    main()
