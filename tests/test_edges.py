"""Test Sobel edge detection.

Tests for penpath.data_pipeline.edges:
    - Magnitude matches a direct 3x3 convolution
    - Border pixels are never edges
    - Strict threshold comparison
    - Uniform and tiny grids produce no edges

Run:
    pytest tests/test_edges.py -v
"""

import numpy as np
import pytest

from penpath.data_pipeline import edges

SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)
SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.float64)


def naive_magnitude(gray):
    """Reference: explicit 3x3 correlation over interior pixels."""
    H, W = gray.shape
    g = gray.astype(np.float64)
    out = np.zeros((H, W))
    for y in range(1, H - 1):
        for x in range(1, W - 1):
            window = g[y - 1:y + 2, x - 1:x + 2]
            gx = (window * SOBEL_X).sum()
            gy = (window * SOBEL_Y).sum()
            out[y, x] = np.sqrt(gx * gx + gy * gy)
    return out


def test_gradient_magnitude_matches_reference():
    rng = np.random.default_rng(5)
    gray = rng.integers(0, 256, size=(9, 12), dtype=np.uint8)

    np.testing.assert_allclose(edges.gradient_magnitude(gray), naive_magnitude(gray))


def test_vertical_step_edge():
    gray = np.zeros((10, 10), dtype=np.uint8)
    gray[:, 5:] = 255

    mask = edges.sobel_edges(gray, threshold=128)

    expected = np.zeros((10, 10), dtype=np.uint8)
    expected[1:9, 4:6] = 255
    np.testing.assert_array_equal(mask, expected)


def test_threshold_is_strict():
    gray = np.zeros((10, 10), dtype=np.uint8)
    gray[:, 5:] = 255

    # Step of 255 gives |Gx| = 4 * 255 = 1020 exactly
    assert not edges.sobel_edges(gray, threshold=1020).any()
    assert edges.sobel_edges(gray, threshold=1019).any()


def test_border_never_edge():
    rng = np.random.default_rng(1)
    gray = rng.integers(0, 256, size=(20, 15), dtype=np.uint8)

    mask = edges.sobel_edges(gray, threshold=0)

    assert mask.shape == gray.shape
    assert not mask[0, :].any()
    assert not mask[-1, :].any()
    assert not mask[:, 0].any()
    assert not mask[:, -1].any()


def test_uniform_image_has_no_edges():
    gray = np.full((30, 30), 200, dtype=np.uint8)
    assert not edges.sobel_edges(gray).any()


@pytest.mark.parametrize("shape", [(0, 0), (2, 2), (1, 10), (10, 2)])
def test_tiny_grids_have_no_edges(shape):
    gray = np.full(shape, 255, dtype=np.uint8)
    mask = edges.sobel_edges(gray)
    assert mask.shape == shape
    assert not mask.any()


def test_mask_values_are_binary(square_rgba):
    gray = square_rgba[..., 0].copy()
    mask = edges.sobel_edges(gray)
    assert set(np.unique(mask).tolist()) == {0, 255}
