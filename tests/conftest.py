"""
Conftest: shared fixtures for all Prism test modules.

1. Filter backend initialized before every test (blur/sharpen need OpenCV)
2. Standard pixel buffers: tiny white, horizontal gradient, seeded random
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.backend import BACKEND
from core.buffer import PixelBuffer


@pytest.fixture(autouse=True)
def backend_ready():
    """Make sure the process-wide backend is loaded. Memoized, so cheap."""
    BACKEND.ensure_sync()
    yield BACKEND


def make_gradient(width=32, height=24):
    """Horizontal R ramp, constant G, vertical B ramp, opaque."""
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :, 0] = np.linspace(0, 255, width, dtype=np.uint8)[np.newaxis, :]
    frame[:, :, 1] = 128
    frame[:, :, 2] = np.linspace(255, 0, height, dtype=np.uint8)[:, np.newaxis]
    return PixelBuffer.from_array(frame)


@pytest.fixture
def white_2x2():
    """2x2 opaque white buffer."""
    return PixelBuffer.blank(2, 2)


@pytest.fixture
def gradient_buffer():
    """32x24 gradient (not blank, not random)."""
    return make_gradient()


@pytest.fixture
def random_buffer():
    """40x30 seeded random RGBA, alpha varies per pixel."""
    rng = np.random.RandomState(42)
    return PixelBuffer.from_array(rng.randint(0, 256, (30, 40, 4), dtype=np.uint8))
