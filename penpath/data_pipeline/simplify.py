"""Ramer-Douglas-Peucker polyline simplification.

Shared by both producers:
    - tracer.trace_image(): raster contours, tolerance ~1.5 px
    - refine.refine_path(): freehand strokes, tolerance 3.0

Implemented with an explicit stack of index ranges instead of recursion, so
stack usage does not depend on input length (worst case depth equals the
number of points). Kept vertices are flagged in a boolean array and
extracted once at the end, which preserves input order and keeps the first
and last points exactly.
"""

import numpy as np

from ..utils.geometry import as_polyline, segment_distances


def douglas_peucker(points, tolerance: float) -> np.ndarray:
    """Reduce a polyline to the vertices needed to stay within tolerance.

    Parameters
    ----------
    points : array-like
        Polyline, shape (N, 2)
    tolerance : float
        Maximum allowed deviation from the simplified polyline

    Returns
    -------
    np.ndarray
        Simplified polyline, shape (M, 2), float64, M <= N. Inputs with 2 or
        fewer points are returned unchanged (same object).

    Notes
    -----
    For each range the interior point farthest from the chord (first, last)
    is found; if it deviates more than tolerance it is kept and both halves
    are processed, otherwise the whole range collapses to its endpoints.
    Deviation is measured to the chord segment, and a zero-length chord
    (closed loops) measures plain distance to the shared endpoint.

    tolerance <= 0 is accepted: every point with any deviation is kept, so
    the output is the input minus exactly-collinear points.

    Examples
    --------
    >>> douglas_peucker([(0, 0), (1, 0.01), (2, -0.01), (3, 0), (10, 0)], 0.5)
    array([[ 0.,  0.],
           [10.,  0.]])
    """
    if len(points) <= 2:
        return points

    pts = as_polyline(points)
    n = pts.shape[0]

    keep = np.zeros(n, dtype=bool)
    keep[0] = True
    keep[-1] = True

    stack = [(0, n - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        dists = segment_distances(pts[first + 1:last], pts[first], pts[last])
        i_max = int(np.argmax(dists))

        if dists[i_max] > tolerance:
            split = first + 1 + i_max
            keep[split] = True
            stack.append((split, last))
            stack.append((first, split))

    return pts[keep]
