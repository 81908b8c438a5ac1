"""Shared fixtures: synthetic RGBA images in canvas getImageData() layout."""

import numpy as np
import pytest


def make_rgba(width, height, value=255):
    """Opaque uniform RGBA image, shape (H, W, 4)."""
    img = np.full((height, width, 4), value, dtype=np.uint8)
    img[..., 3] = 255
    return img


@pytest.fixture
def white_rgba():
    """40x40 all-white image."""
    return make_rgba(40, 40)


@pytest.fixture
def square_rgba():
    """40x40 white image with a solid black square over pixels 10..29."""
    img = make_rgba(40, 40)
    img[10:30, 10:30, :3] = 0
    return img


@pytest.fixture
def square_ring():
    """Edge pixels Sobel marks for square_rgba: a 2-px band over 9..30."""
    return {
        (x, y)
        for y in range(9, 31)
        for x in range(9, 31)
        if not (11 <= x <= 28 and 11 <= y <= 28)
    }
