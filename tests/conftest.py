"""Shared fixtures for the tray denoiser tests."""

import os
from typing import Optional
from unittest.mock import MagicMock

import pytest

from tray_denoiser.engine import EngineCapability
from tray_denoiser.model_locator import ModelLocator


def make_mock_engine(devices: Optional[list[str]] = None) -> MagicMock:
    """Create a mock engine reporting the given input devices."""
    engine = MagicMock(spec=EngineCapability)
    engine.list_devices.return_value = (
        ["BlackHole 2ch", "MacBook Pro Microphone"] if devices is None else devices
    )
    return engine


@pytest.fixture
def engine() -> MagicMock:
    return make_mock_engine()


@pytest.fixture
def model_root(tmp_path: object) -> str:
    """Install root containing models/denoiser_model.onnx."""
    root = str(tmp_path)
    os.makedirs(os.path.join(root, "models"))
    with open(os.path.join(root, "models", "denoiser_model.onnx"), "wb") as f:
        f.write(b"onnx")
    return root


@pytest.fixture
def locator(model_root: str) -> ModelLocator:
    return ModelLocator(install_root=model_root)
