#!/usr/bin/env python3
"""Trace an image file into polylines and save them as YAML.

Pipeline: decode -> downscale to max_side_px -> grayscale -> Sobel edges
-> contour traversal -> Douglas-Peucker -> penpath.paths.v1 YAML.

Output format (penpath.paths.v1):
    schema: penpath.paths.v1
    render_px: [W, H]
    paths:
      - {id: path-000000, source: raster, points: [[x, y], ...], length: ..., closed: ...}

Coordinates are pixels of the downscaled image (render_px).

Usage:
    python scripts/trace_image.py drawing.png -o outputs/drawing_paths.yaml
    python scripts/trace_image.py photo.jpg --threshold 96 --tolerance 2.0 -v
    python scripts/trace_image.py photo.jpg --log-file outputs/logs/trace.log --log-max-bytes 1000000
"""
import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from penpath.data_pipeline.tracer import trace_file
from penpath.utils import fs, validators
from penpath.utils.logging_config import get_logger, push_context, setup_logging

DEFAULT_CONFIG = Path(__file__).parent.parent / "configs" / "vectorizer.v1.yaml"

logger = get_logger(__name__)


def main(argv=None) -> int:
    """CLI entrypoint for image tracing."""
    parser = argparse.ArgumentParser(
        description="Trace image outlines into plotter-ready polylines",
    )
    parser.add_argument("image", type=Path, help="Input image (PNG, JPEG, ...)")
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output YAML path (default: <image stem>_paths.yaml next to the image)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Vectorizer config YAML (default: {DEFAULT_CONFIG.name})",
    )
    parser.add_argument("--threshold", type=float, default=None, help="Override Sobel edge threshold")
    parser.add_argument("--tolerance", type=float, default=None, help="Override simplification tolerance (px)")
    parser.add_argument("--max-side", type=int, default=None, help="Override downscale limit (px)")
    parser.add_argument("--log-file", type=str, default=None, help="Also log to this file")
    parser.add_argument(
        "--log-max-bytes",
        type=int,
        default=None,
        help="Rotate the log file once it reaches this size (requires --log-file)",
    )
    parser.add_argument("--log-backups", type=int, default=3, help="Rotated log files to keep (default: 3)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    rotate = None
    if args.log_max_bytes is not None:
        rotate = {"mode": "size", "max_bytes": args.log_max_bytes, "backup_count": args.log_backups}

    setup_logging(
        log_level="DEBUG" if args.verbose else "INFO",
        log_file=args.log_file,
        rotate=rotate,
        quiet_libs=["PIL"],
        context={"app": "trace"},
    )
    push_context(image=args.image.name)

    overrides = {}
    if args.tolerance is not None:
        overrides['simplify_tolerance'] = args.tolerance
    if args.max_side is not None:
        overrides['max_side_px'] = args.max_side
    if args.threshold is not None:
        overrides['edges'] = {'threshold': args.threshold}

    # pydantic ValidationError subclasses ValueError
    try:
        cfg = validators.load_vectorizer_config(args.config)
        raster_cfg = cfg.raster
        if overrides:
            raster_cfg = validators.RasterTraceConfig(**{**raster_cfg.model_dump(), **overrides})
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    try:
        result = trace_file(args.image, raster_cfg)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    if not result.paths:
        logger.warning("No clear outlines found; try a higher-contrast image or a lower --threshold")

    output = args.output or args.image.with_name(f"{args.image.stem}_paths.yaml")
    doc = validators.PathsFileV1(
        render_px=[result.width, result.height],
        paths=result.paths,
    )
    fs.atomic_yaml_dump(doc.model_dump(mode="json", by_alias=True), output)

    total_len = sum(p.length for p in result.paths)
    logger.info(f"Saved {len(result.paths)} paths ({total_len:.1f} px total) to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
