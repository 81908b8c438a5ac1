"""Geometric primitives for polylines.

Provides:
    - Point and point-to-segment distances
    - Polyline arc length (path metrics)
    - Bounding box and closed-path detection

Used by:
    - Simplifier: chord deviation for Douglas-Peucker
    - Refiner: jitter filtering and resampling
    - Tracer: path length and closure flags on emitted paths

Polylines are numpy arrays of shape (N, 2) holding (x, y) pairs. Public
functions accept any array-like of pairs and normalize it with as_polyline().
Units are whatever the caller uses (pixels for traced images, canvas units
for freehand strokes); nothing here converts between them.
"""

from typing import Tuple

import numpy as np


def as_polyline(points) -> np.ndarray:
    """Normalize an array-like of (x, y) pairs to a float64 (N, 2) array.

    Parameters
    ----------
    points : array-like
        Sequence of (x, y) pairs, or an (N, 2) array

    Returns
    -------
    np.ndarray
        Polyline, shape (N, 2), dtype float64 (N may be 0)

    Raises
    ------
    ValueError
        If the input cannot be viewed as (N, 2)
    """
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return arr.reshape(0, 2)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected points of shape (N, 2), got {arr.shape}")
    return arr


def point_distance(a, b) -> float:
    """Euclidean distance between two points."""
    return float(np.hypot(b[0] - a[0], b[1] - a[1]))


def segment_distances(points: np.ndarray, start, end) -> np.ndarray:
    """Vectorized point-to-segment distance.

    The projection is clamped to the segment, so points beyond either end
    measure to the nearest endpoint. A zero-length segment degrades to the
    plain point-to-point distance.

    Parameters
    ----------
    points : np.ndarray
        Query points, shape (M, 2)
    start, end : array-like
        Segment endpoints (x, y)

    Returns
    -------
    np.ndarray
        Distances, shape (M,)
    """
    sx, sy = float(start[0]), float(start[1])
    cx = float(end[0]) - sx
    cy = float(end[1]) - sy
    ax = points[:, 0] - sx
    ay = points[:, 1] - sy

    len_sq = cx * cx + cy * cy
    if len_sq == 0.0:
        return np.hypot(ax, ay)

    t = np.clip((ax * cx + ay * cy) / len_sq, 0.0, 1.0)
    return np.hypot(ax - t * cx, ay - t * cy)


def polyline_length(points) -> float:
    """Compute total arc length of a polyline.

    Parameters
    ----------
    points : array-like
        Polyline vertices, shape (N, 2)

    Returns
    -------
    float
        Sum of Euclidean distances between consecutive points; 0.0 if N < 2

    Notes
    -----
    Invariant under reversal of the point order.
    """
    pts = as_polyline(points)
    if pts.shape[0] < 2:
        return 0.0

    diffs = np.diff(pts, axis=0)
    return float(np.hypot(diffs[:, 0], diffs[:, 1]).sum())


def polyline_bbox(points) -> Tuple[float, float, float, float]:
    """Compute axis-aligned bounding box of polyline.

    Returns
    -------
    Tuple[float, float, float, float]
        (xmin, ymin, xmax, ymax); (0, 0, 0, 0) if no points
    """
    pts = as_polyline(points)
    if pts.shape[0] == 0:
        return (0.0, 0.0, 0.0, 0.0)

    xmin, ymin = pts.min(axis=0)
    xmax, ymax = pts.max(axis=0)
    return (float(xmin), float(ymin), float(xmax), float(ymax))


def is_closed(points, max_gap: float = 10.0) -> bool:
    """True if the first and last points are closer than max_gap.

    Closure is a caller convention: traced outlines whose ends nearly meet
    are drawn as closed loops. Polylines with fewer than 3 points are never
    considered closed.
    """
    pts = as_polyline(points)
    if pts.shape[0] < 3:
        return False
    return point_distance(pts[0], pts[-1]) < max_gap
