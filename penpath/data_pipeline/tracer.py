"""Vectorization pipelines producing TracedPath lists.

Raster:
    RGBA buffer -> rgba_to_gray -> sobel_edges -> trace_contours
    -> douglas_peucker -> TracedPath(source="raster")

Freehand:
    pointer samples -> refine_path -> TracedPath(source="freehand")

Every call is independent: configs are passed in, nothing is cached between
calls, and path ids (path-000000, path-000001, ...) are unique within the
returned list only. Callers that merge results from several calls re-key
the ids themselves.

Coordinates stay in the producer's frame (image pixels for rasters, canvas
units for strokes); fit_to_canvas() maps traced pixel paths onto a canvas.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

import numpy as np

from ..utils import profiler
from ..utils.geometry import as_polyline, is_closed, polyline_length
from ..utils.validators import RasterTraceConfig, RefineConfig, TracedPath
from .contours import trace_contours
from .edges import sobel_edges
from .raster import load_raster, rgba_to_gray
from .refine import refine_path
from .simplify import douglas_peucker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceResult:
    """Paths traced from an image file plus the resolution they live in."""

    paths: List[TracedPath]
    width: int
    height: int
    original_width: int
    original_height: int


def make_path_id(index: int) -> str:
    return f"path-{index:06d}"


def _make_path(
    index: int,
    source: str,
    points,
    close_distance: Optional[float] = None
) -> TracedPath:
    pts = as_polyline(points)
    closed = is_closed(pts, close_distance) if close_distance is not None else False
    return TracedPath(
        id=make_path_id(index),
        source=source,
        points=[(x, y) for x, y in pts.tolist()],
        length=polyline_length(pts),
        closed=closed,
    )


def trace_image(
    buffer,
    width: int,
    height: int,
    cfg: Optional[RasterTraceConfig] = None
) -> List[TracedPath]:
    """Trace edge outlines of a decoded RGBA image into polylines.

    Parameters
    ----------
    buffer : bytes | np.ndarray
        RGBA pixels, 4 bytes per pixel, row-major
    width, height : int
        Image dimensions; callers should downscale large images first
        (see raster.fit_size)
    cfg : RasterTraceConfig, optional
        Threshold, noise floor and tolerance; defaults to RasterTraceConfig()

    Returns
    -------
    List[TracedPath]
        One path per surviving edge component, in pixel coordinates. An image
        without edges above threshold yields an empty list.

    Raises
    ------
    ValueError
        If the buffer length does not match width * height * 4
    """
    cfg = cfg or RasterTraceConfig()
    sink = profiler.logger_sink(logger)

    with profiler.timer("grayscale", sink):
        gray = rgba_to_gray(buffer, width, height)

    with profiler.timer("sobel", sink):
        edge_mask = sobel_edges(gray, cfg.edges.threshold)

    with profiler.timer("contours", sink):
        contours = trace_contours(edge_mask, cfg.contours.min_pixels)

    paths = []
    with profiler.timer("simplify", sink):
        for contour in contours:
            if len(contour) < 3:
                continue

            simplified = douglas_peucker(contour, cfg.simplify_tolerance)
            if len(simplified) < cfg.min_path_points:
                continue

            paths.append(_make_path(len(paths), "raster", simplified, cfg.close_distance_px))

    logger.info(f"Traced {len(paths)} paths from {width}x{height} image ({len(contours)} contours)")
    return paths


def trace_file(path: Union[str, Path], cfg: Optional[RasterTraceConfig] = None) -> TraceResult:
    """Decode, downscale and trace an image file.

    Raises
    ------
    FileNotFoundError
        If the image doesn't exist
    """
    cfg = cfg or RasterTraceConfig()
    image = load_raster(path, cfg.max_side_px)
    paths = trace_image(image.data, image.width, image.height, cfg)

    return TraceResult(
        paths=paths,
        width=image.width,
        height=image.height,
        original_width=image.original_width,
        original_height=image.original_height,
    )


def refine_freehand(
    points,
    cfg: Optional[RefineConfig] = None,
    path_id: Optional[str] = None
) -> TracedPath:
    """Refine one freehand stroke into a TracedPath.

    Parameters
    ----------
    points : array-like
        Raw pointer samples, shape (N, 2)
    cfg : RefineConfig, optional
        Stage toggles and parameters
    path_id : str, optional
        Identifier to assign; defaults to path-000000

    Returns
    -------
    TracedPath
        Refined polyline with its arc length; strokes with fewer than two
        samples pass through with length 0
    """
    refined = refine_path(points, cfg)
    path = _make_path(0, "freehand", refined)
    if path_id is not None:
        path = path.model_copy(update={'id': path_id})
    return path


def refine_strokes(strokes: Iterable, cfg: Optional[RefineConfig] = None) -> List[TracedPath]:
    """Refine several strokes; ids follow input order and are unique."""
    return [
        refine_freehand(stroke, cfg, path_id=make_path_id(i))
        for i, stroke in enumerate(strokes)
    ]


def fit_to_canvas(
    paths: List[TracedPath],
    width: int,
    height: int,
    canvas_width: float,
    canvas_height: float,
    margin: float = 50.0
) -> List[TracedPath]:
    """Scale and center traced pixel paths onto a canvas.

    A single uniform scale fits the width x height image inside the canvas
    minus margin on every side; the result is centered on both axes.

    Parameters
    ----------
    paths : List[TracedPath]
        Paths in image pixel coordinates
    width, height : int
        Traced image resolution
    canvas_width, canvas_height : float
        Target canvas size
    margin : float
        Border left free on each side, default 50

    Returns
    -------
    List[TracedPath]
        New paths in canvas coordinates; ids, source and closure are kept,
        lengths are recomputed

    Raises
    ------
    ValueError
        If the image size is not positive or the margin leaves no room
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive, got {width}x{height}")

    available_w = canvas_width - 2 * margin
    available_h = canvas_height - 2 * margin
    if available_w <= 0 or available_h <= 0:
        raise ValueError(
            f"Margin {margin} leaves no drawable area on a {canvas_width}x{canvas_height} canvas"
        )

    scale = min(available_w / width, available_h / height)
    offset = np.array([
        (canvas_width - width * scale) / 2.0,
        (canvas_height - height * scale) / 2.0,
    ])

    fitted = []
    for path in paths:
        pts = path.as_array() * scale + offset
        fitted.append(path.model_copy(update={
            'points': [(x, y) for x, y in pts.tolist()],
            'length': polyline_length(pts),
        }))
    return fitted
