"""Vectorization pipeline: raster images and freehand strokes -> polylines.

Modules:
    - raster: RGBA decoding/downscaling and grayscale conversion
    - edges: Sobel gradient magnitude and edge mask
    - contours: 8-connected edge components as ordered pixel sequences
    - simplify: Douglas-Peucker with an explicit work stack
    - refine: jitter removal, smoothing, resampling for freehand strokes
    - tracer: end-to-end pipelines returning TracedPath lists

Workflow (raster):
    1. load_raster() or a caller-decoded RGBA buffer
    2. rgba_to_gray() -> sobel_edges() -> trace_contours()
    3. douglas_peucker() per contour -> TracedPath

Workflow (freehand):
    1. Raw pointer samples
    2. refine_path(): jitter -> simplify -> smooth -> resample
    3. TracedPath with arc length
"""

from .tracer import (
    TraceResult,
    fit_to_canvas,
    refine_freehand,
    refine_strokes,
    trace_file,
    trace_image,
)

__all__ = [
    'TraceResult',
    'fit_to_canvas',
    'refine_freehand',
    'refine_strokes',
    'trace_file',
    'trace_image',
]
