"""Pytest configuration and fixtures."""

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def uniform_4x4():
    """4x4 image filled with (10, 20, 30)."""
    return np.full((4, 4, 3), (10, 20, 30), dtype=np.uint8)


@pytest.fixture
def checker_2x2():
    """2x2 black/white checkerboard."""
    img = np.zeros((2, 2, 3), dtype=np.uint8)
    img[0, 1] = 255
    img[1, 0] = 255
    return img


@pytest.fixture
def random_image(rng):
    return rng.integers(0, 256, size=(13, 17, 3), dtype=np.uint8)


@pytest.fixture
def image_file(tmp_path, rng):
    """Small PNG on disk with a bright square on a dark background."""
    arr = np.full((24, 32, 3), 20, dtype=np.uint8)
    arr[4:12, 6:20] = (200, 120, 40)
    arr += rng.integers(0, 5, size=arr.shape, dtype=np.uint8)
    path = tmp_path / "input.png"
    Image.fromarray(arr).save(path)
    return path
