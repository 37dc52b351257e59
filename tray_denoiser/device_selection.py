"""
Default Input Device Selection

Picks the microphone used when a session starts.
"""
from typing import Sequence

from .constants import VIRTUAL_DEVICE_MARKER


def select_input_device(devices: Sequence[str], virtual_marker: str = VIRTUAL_DEVICE_MARKER) -> int:
    """
    Select the default physical microphone.
    
    Virtual routing devices (e.g. BlackHole) are skipped so they are never
    picked while a real microphone is present. Falls back to index 0 when
    nothing else qualifies, including for an empty list.
    
    Args:
        devices: Input device names, in the order the engine enumerates them
        virtual_marker: Case-insensitive substring identifying virtual devices
    
    Returns:
        Index of the selected device
    """
    marker = virtual_marker.lower()
    for index, name in enumerate(devices):
        if marker not in name.lower():
            return index
    return 0
