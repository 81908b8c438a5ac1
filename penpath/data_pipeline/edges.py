"""Sobel edge detection: intensity grid -> binary edge mask.

    Gx = [-1 0 1; -2 0 2; -1 0 1]
    Gy = [-1 -2 -1; 0 0 0; 1 2 1]
    magnitude = sqrt(Gx^2 + Gy^2)

A pixel is an edge (255) iff magnitude > threshold. The 1-pixel border is
never an edge because the 3x3 neighborhood is incomplete there; OpenCV's
border extrapolation only affects those pixels, which are zeroed afterwards.
"""

import cv2
import numpy as np

EDGE = 255


def gradient_magnitude(gray: np.ndarray) -> np.ndarray:
    """Sobel gradient magnitude of an intensity grid.

    Parameters
    ----------
    gray : np.ndarray
        Intensity grid, shape (H, W), dtype uint8

    Returns
    -------
    np.ndarray
        Magnitude, shape (H, W), dtype float64, border pixels set to 0
    """
    if gray.ndim != 2:
        raise ValueError(f"Expected a 2D intensity grid, got shape {gray.shape}")

    H, W = gray.shape
    magnitude = np.zeros((H, W), dtype=np.float64)
    if H < 3 or W < 3:
        return magnitude

    gx = cv2.Sobel(gray, cv2.CV_64F, 1, 0, ksize=3)
    gy = cv2.Sobel(gray, cv2.CV_64F, 0, 1, ksize=3)

    magnitude[1:-1, 1:-1] = np.sqrt(gx[1:-1, 1:-1] ** 2 + gy[1:-1, 1:-1] ** 2)
    return magnitude


def sobel_edges(gray: np.ndarray, threshold: float = 128.0) -> np.ndarray:
    """Compute a binary edge mask from an intensity grid.

    Parameters
    ----------
    gray : np.ndarray
        Intensity grid, shape (H, W), dtype uint8
    threshold : float
        Magnitude threshold, default 128 (strict comparison)

    Returns
    -------
    np.ndarray
        Edge mask, shape (H, W), dtype uint8, values {0, 255}

    Notes
    -----
    Grids smaller than 3x3 have no interior and yield an all-zero mask.
    A uniform image has zero gradient everywhere and yields no edges.
    """
    magnitude = gradient_magnitude(gray)
    mask = np.zeros(magnitude.shape, dtype=np.uint8)
    interior = magnitude[1:-1, 1:-1]
    mask[1:-1, 1:-1] = np.where(interior > threshold, EDGE, 0)
    return mask
