"""Allow running as ``python -m tray_denoiser``."""
from .cli import main

main()
