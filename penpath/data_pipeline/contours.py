"""Contour extraction: edge mask -> connected pixel groups.

Each 8-connected component of edge pixels becomes one contour, its pixels
listed in the order an explicit-stack depth-first traversal discovers them.
This is connectivity-discovery order, not a boundary walk: on edge bands
wider than one pixel the sequence zig-zags across the band. Downstream
simplification works on that order as-is.

Memory is linear in image size (a flat row-major visited array) and the
traversal never recurses, so dense masks cannot exhaust the call stack.
"""

import logging
from typing import List

import numpy as np

logger = logging.getLogger(__name__)

# (dx, dy) neighbor push order; the last pushed neighbor is visited first
NEIGHBORS_8 = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


def _trace_component(start: int, is_edge: list, visited: bytearray, W: int, H: int) -> List[tuple]:
    """Depth-first traversal from flat index start; returns (x, y) pixels."""
    pixels = []
    stack = [start]

    while stack:
        idx = stack.pop()
        if visited[idx]:
            continue
        visited[idx] = 1

        y, x = divmod(idx, W)
        pixels.append((x, y))

        for dx, dy in NEIGHBORS_8:
            nx = x + dx
            ny = y + dy
            if 0 <= nx < W and 0 <= ny < H:
                n_idx = ny * W + nx
                if is_edge[n_idx] and not visited[n_idx]:
                    stack.append(n_idx)

    return pixels


def trace_contours(edge_mask: np.ndarray, min_pixels: int = 10) -> List[np.ndarray]:
    """Extract 8-connected edge components as ordered pixel sequences.

    Parameters
    ----------
    edge_mask : np.ndarray
        Binary mask, shape (H, W); any nonzero value is an edge
    min_pixels : int
        Components with fewer pixels are discarded as noise, default 10

    Returns
    -------
    List[np.ndarray]
        Contours in row-major order of their first pixel, each shape (N, 2)
        as (x, y), dtype int64

    Notes
    -----
    Every pixel is visited at most once, so the total cost is O(W*H).
    An empty or edge-free mask yields an empty list.
    """
    if edge_mask.ndim != 2:
        raise ValueError(f"Expected a 2D edge mask, got shape {edge_mask.shape}")

    H, W = edge_mask.shape
    flat = edge_mask.reshape(-1) > 0
    is_edge = flat.tolist()
    visited = bytearray(H * W)

    contours = []
    dropped = 0
    for start in np.flatnonzero(flat).tolist():
        if visited[start]:
            continue

        pixels = _trace_component(start, is_edge, visited, W, H)
        if len(pixels) < min_pixels:
            dropped += 1
            continue

        contours.append(np.array(pixels, dtype=np.int64))

    logger.debug(f"Traced {len(contours)} contours ({dropped} below {min_pixels} px dropped)")
    return contours
