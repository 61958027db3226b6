import random

import numpy as np
import pytest

from poly_painter.config import PainterConfig


@pytest.fixture
def gradient_image():
    """64x48 RGB gradient: red grows left to right, green top to bottom."""
    h, w = 48, 64
    img = np.zeros((h, w, 3), dtype=np.uint8)
    img[:, :, 0] = np.linspace(0, 255, w, dtype=np.uint8)[np.newaxis, :]
    img[:, :, 1] = np.linspace(0, 255, h, dtype=np.uint8)[:, np.newaxis]
    img[:, :, 2] = 128
    return img


@pytest.fixture
def white_image():
    return np.full((20, 30, 3), 255, dtype=np.uint8)


@pytest.fixture
def small_config():
    """Small canvas, fast-decaying strokes so outlines kick in quickly."""
    return PainterConfig(
        dest_width=100,
        dest_height=80,
        stroke_ratio=0.2,
        initial_alpha=10.0,
        stroke_reduction=0.05,
        alpha_increase=2.0,
        stroke_inversion_threshold=0.5,
        stroke_jitter=5,
        min_edge_count=3,
        max_edge_count=8,
        rotation_jitter=0.5,
    )


@pytest.fixture
def rng():
    return random.Random(1234)
