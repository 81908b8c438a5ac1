"""Freehand stroke refinement: raw pointer samples -> clean polyline.

Stages, applied in this fixed order by refine_path():
    1. remove_jitter(): drop samples closer than min_distance to the last kept one
    2. douglas_peucker(): drop vertices within tolerance of the simplified shape
    3. smooth_path(): one Laplacian averaging pass over interior points
    4. resample_path(): re-emit points at a fixed arc-length spacing

Each stage is toggled by a RefineConfig flag; a disabled stage passes its
input through unchanged. Every stage leaves polylines with fewer than two
points untouched.
"""

import logging
from typing import Optional

import numpy as np

from ..utils.geometry import as_polyline, point_distance
from ..utils.validators import RefineConfig
from .simplify import douglas_peucker

logger = logging.getLogger(__name__)


def remove_jitter(points, min_distance: float = 3.0) -> np.ndarray:
    """Drop samples too close to the previously kept sample.

    Parameters
    ----------
    points : array-like
        Raw samples, shape (N, 2)
    min_distance : float
        A sample is kept only if it is at least this far from the last
        kept sample, default 3.0

    Returns
    -------
    np.ndarray
        Filtered polyline; the first sample is always kept. Inputs with one
        point or none are returned unchanged.

    Notes
    -----
    Distances are measured against the last *kept* sample, so a slow drag
    still advances once its samples accumulate min_distance of travel.
    The last raw sample may be dropped; resampling restores endpoint
    coverage only up to the last kept point.
    """
    if len(points) <= 1:
        return points

    pts = as_polyline(points)
    kept = [0]
    last = pts[0]
    for i in range(1, pts.shape[0]):
        if point_distance(last, pts[i]) >= min_distance:
            kept.append(i)
            last = pts[i]

    return pts[kept]


def smooth_path(points, factor: float = 0.5) -> np.ndarray:
    """Laplacian smoothing of interior points.

    P' = P + factor * (prev + next - 2P) for every interior point, computed
    from the unsmoothed neighbors. Endpoints are copied unchanged.

    Parameters
    ----------
    points : array-like
        Polyline, shape (N, 2)
    factor : float
        Smoothing strength in [0, 1]; 0.5 moves each point to the midpoint
        of its neighbors

    Returns
    -------
    np.ndarray
        Smoothed polyline. With factor == 0, or 2 points or fewer, the input
        object itself is returned.

    Examples
    --------
    >>> smooth_path([(0, 0), (10, 0), (20, 10)], factor=0.5)[1]
    array([10.,  5.])
    """
    if len(points) <= 2:
        return points
    if factor == 0:
        return points

    pts = as_polyline(points)
    smoothed = pts.copy()
    smoothed[1:-1] = pts[1:-1] + factor * (pts[:-2] + pts[2:] - 2.0 * pts[1:-1])
    return smoothed


def resample_path(points, spacing: float = 5.0) -> np.ndarray:
    """Re-emit points at a fixed arc-length spacing.

    Parameters
    ----------
    points : array-like
        Polyline, shape (N, 2)
    spacing : float
        Arc-length distance between emitted points, default 5.0

    Returns
    -------
    np.ndarray
        Resampled polyline starting at the original first point. The true
        last point is appended when the last emitted point is more than
        spacing / 2 away from it, so only the final step may be shorter.
        Inputs with fewer than 2 points are returned unchanged.

    Raises
    ------
    ValueError
        If spacing is not positive

    Notes
    -----
    Arc length accumulates across vertices; a long segment can emit several
    points. Spacing is along the path, so across a corner the straight-line
    distance between neighbors is shorter than spacing.
    """
    if spacing <= 0:
        raise ValueError(f"Resample spacing must be positive, got {spacing}")
    if len(points) < 2:
        return points

    pts = as_polyline(points)
    resampled = [pts[0]]
    accumulated = 0.0

    for i in range(1, pts.shape[0]):
        prev = pts[i - 1]
        cur = pts[i]
        seg_len = point_distance(prev, cur)
        accumulated += seg_len

        # Emit at the exact spacing, measured back from cur along the segment
        while accumulated >= spacing:
            ratio = (accumulated - spacing) / seg_len
            resampled.append(cur - ratio * (cur - prev))
            accumulated -= spacing

    last = pts[-1]
    if point_distance(resampled[-1], last) > spacing * 0.5:
        resampled.append(last)

    return np.array(resampled, dtype=np.float64)


def refine_path(points, cfg: Optional[RefineConfig] = None) -> np.ndarray:
    """Run the enabled refinement stages over a freehand stroke.

    Parameters
    ----------
    points : array-like
        Raw pointer samples, shape (N, 2); timestamps are not used
    cfg : RefineConfig, optional
        Stage toggles and parameters; defaults to RefineConfig()

    Returns
    -------
    np.ndarray
        Refined polyline, shape (M, 2). Inputs with fewer than 2 points come
        back as an array of the same points.
    """
    cfg = cfg or RefineConfig()
    processed = as_polyline(points)
    n_in = processed.shape[0]

    if cfg.remove_jitter:
        processed = remove_jitter(processed, cfg.jitter_min_distance)

    if cfg.simplify:
        processed = douglas_peucker(processed, cfg.simplify_tolerance)

    if cfg.smooth:
        processed = smooth_path(processed, cfg.smoothing_factor)

    if cfg.resample:
        processed = resample_path(processed, cfg.resample_spacing)

    logger.debug(f"Refined stroke: {n_in} -> {processed.shape[0]} points")
    return processed
