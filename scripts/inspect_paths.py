#!/usr/bin/env python3
"""Inspect a traced paths file before handing it to G-code tooling.

Checks:
    - Schema and fields (penpath.paths.v1)
    - Every point lies inside render_px
    - Stored lengths match the points

Reports path count, closed count, total length and the overall bounding box.

Usage:
    python scripts/inspect_paths.py outputs/drawing_paths.yaml
"""
import argparse
import sys
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from penpath.utils import validators
from penpath.utils.geometry import polyline_bbox, polyline_length

LENGTH_RTOL = 1e-6


def inspect_paths_file(path: Path) -> dict:
    """Summarize and check a penpath.paths.v1 file.

    Parameters
    ----------
    path : Path
        Paths YAML written by scripts/trace_image.py

    Returns
    -------
    dict
        Counts, total length, bbox (xmin, ymin, xmax, ymax) and any errors

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If the file fails schema validation
    """
    doc = validators.load_paths_file(path)
    width, height = doc.render_px

    results = {
        "paths": len(doc.paths),
        "closed": sum(1 for p in doc.paths if p.closed),
        "points": sum(len(p.points) for p in doc.paths),
        "total_length": sum(p.length for p in doc.paths),
        "render_px": (width, height),
        "bbox": (0.0, 0.0, 0.0, 0.0),
        "errors": [],
    }

    if doc.paths:
        all_points = np.concatenate([p.as_array() for p in doc.paths])
        results["bbox"] = polyline_bbox(all_points)

    for p in doc.paths:
        xmin, ymin, xmax, ymax = polyline_bbox(p.points)
        if xmin < 0 or ymin < 0 or xmax > width or ymax > height:
            results["errors"].append(
                f"{p.id}: extends to ({xmin:.1f}, {ymin:.1f})-({xmax:.1f}, {ymax:.1f}), "
                f"outside {width}x{height}"
            )

        actual = polyline_length(p.points)
        if not np.isclose(actual, p.length, rtol=LENGTH_RTOL, atol=1e-6):
            results["errors"].append(f"{p.id}: stored length {p.length:.3f}, points give {actual:.3f}")

    return results


def main(argv=None) -> int:
    """CLI entrypoint."""
    parser = argparse.ArgumentParser(description="Inspect a penpath.paths.v1 file")
    parser.add_argument("paths_file", type=Path, help="Paths YAML to inspect")
    args = parser.parse_args(argv)

    try:
        results = inspect_paths_file(args.paths_file)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    xmin, ymin, xmax, ymax = results["bbox"]
    print(f"Inspecting: {args.paths_file}")
    print(f"  Render size: {results['render_px'][0]}x{results['render_px'][1]}")
    print(f"  Paths: {results['paths']} ({results['closed']} closed)")
    print(f"  Points: {results['points']}")
    print(f"  Total length: {results['total_length']:.1f} px")
    print(f"  Bounding box: ({xmin:.1f}, {ymin:.1f}) - ({xmax:.1f}, {ymax:.1f})")

    if results["errors"]:
        print(f"\nErrors ({len(results['errors'])}):")
        for err in results["errors"]:
            print(f"  - {err}")
        return 1

    print("\nAll paths valid!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
