"""penpath: vectorization core for pen plotters and drawing robots.

Turns freehand pointer strokes and raster images into clean, evenly spaced
polylines for a downstream motion planner (G-code generator, plotter).

Architecture layers (strict one-way dependency):
    scripts/ -> penpath/data_pipeline/ -> penpath/utils/

Key invariants:
    - Pure per-call processing: configs are values, no state between calls
    - Polylines are (N, 2) float arrays; TracedPath is the exchange unit
    - Simplification always keeps the exact first and last points
    - YAML-only configs (configs/vectorizer.v1.yaml)
"""

__version__ = "0.3.0"
