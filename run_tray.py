#!/usr/bin/env python3
"""
Run Tray Denoiser

Entry point script for the tray application.

Usage:
    python run_tray.py [options]

    Or as a module:
    python -m tray_denoiser [options]
"""
from tray_denoiser.cli import main

if __name__ == "__main__":
    main()
