"""Test the scripts/inspect_paths.py paths-file checker.

Run:
    pytest tests/test_inspect_script.py -v
"""

import importlib.util
from pathlib import Path

import pytest

from penpath.utils import fs
from penpath.utils.geometry import polyline_length
from penpath.utils.validators import PathsFileV1, TracedPath

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "inspect_paths.py"


@pytest.fixture(scope="module")
def inspect_script():
    spec = importlib.util.spec_from_file_location("inspect_paths", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _path(path_id, points, closed=False, length=None):
    return TracedPath(
        id=path_id,
        source="raster",
        points=points,
        length=polyline_length(points) if length is None else length,
        closed=closed,
    )


def _write(tmp_path, paths, render_px=(40, 30)):
    doc = PathsFileV1(render_px=list(render_px), paths=paths)
    out = tmp_path / "doc.paths.yaml"
    fs.atomic_yaml_dump(doc.model_dump(mode="json", by_alias=True), out)
    return out


def test_summary_of_valid_file(inspect_script, tmp_path):
    out = _write(tmp_path, [
        _path("path-000000", [(2, 3), (10, 3), (10, 9), (2, 3)], closed=True),
        _path("path-000001", [(20, 25), (35, 5)]),
    ])

    results = inspect_script.inspect_paths_file(out)

    assert results["paths"] == 2
    assert results["closed"] == 1
    assert results["points"] == 6
    assert results["bbox"] == (2.0, 3.0, 35.0, 25.0)
    assert results["total_length"] == pytest.approx(8 + 6 + 10 + 25)
    assert results["errors"] == []


def test_out_of_bounds_path_reported(inspect_script, tmp_path):
    out = _write(tmp_path, [_path("path-000000", [(5, 5), (45, 10)])])

    results = inspect_script.inspect_paths_file(out)

    assert len(results["errors"]) == 1
    assert "path-000000" in results["errors"][0]
    assert "outside 40x30" in results["errors"][0]


def test_length_mismatch_reported(inspect_script, tmp_path):
    out = _write(tmp_path, [_path("path-000000", [(0, 0), (3, 4)], length=7.0)])

    results = inspect_script.inspect_paths_file(out)

    assert any("stored length 7.000" in e for e in results["errors"])


def test_empty_file(inspect_script, tmp_path):
    results = inspect_script.inspect_paths_file(_write(tmp_path, []))
    assert results["paths"] == 0
    assert results["bbox"] == (0.0, 0.0, 0.0, 0.0)
    assert results["errors"] == []


def test_main_exit_codes(inspect_script, tmp_path, capsys):
    good = _write(tmp_path, [_path("path-000000", [(1, 1), (5, 1)])])
    assert inspect_script.main([str(good)]) == 0
    assert "All paths valid!" in capsys.readouterr().out

    bad = tmp_path / "bad.yaml"
    bad.write_text("schema: penpath.paths.v0\nrender_px: [1, 1]\npaths: []\n")
    assert inspect_script.main([str(bad)]) == 1

    assert inspect_script.main([str(tmp_path / "missing.yaml")]) == 1
