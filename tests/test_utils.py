"""Test shared utilities: fs, logging_config, profiler.

Run:
    pytest tests/test_utils.py -v
"""

import contextlib
import io
import json
import logging
import logging.handlers

import pytest
import yaml

from penpath.utils import fs, logging_config, profiler


@pytest.fixture(autouse=True)
def reset_logging_context():
    yield
    logging_config.pop_context()


# ============================================================================
# FS TESTS
# ============================================================================

def test_yaml_round_trip(tmp_path):
    data = {"schema": "penpath.paths.v1", "render_px": [40, 30], "paths": []}
    path = tmp_path / "nested" / "doc.yaml"

    fs.atomic_yaml_dump(data, path)

    assert fs.load_yaml(path) == data
    assert not path.with_suffix(".yaml.tmp").exists()


def test_yaml_preserves_key_order(tmp_path):
    path = tmp_path / "order.yaml"
    fs.atomic_yaml_dump({"z": 1, "a": 2, "m": [3, 4]}, path)

    assert list(yaml.safe_load(path.read_text())) == ["z", "a", "m"]
    text = path.read_text()
    assert text.index("z:") < text.index("a:") < text.index("m:")


def test_load_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        fs.load_yaml(tmp_path / "nope.yaml")


def test_load_yaml_invalid(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("a: [1, 2\n")
    with pytest.raises(yaml.YAMLError):
        fs.load_yaml(path)


def test_atomic_write_bytes_overwrites(tmp_path):
    path = tmp_path / "blob.bin"
    fs.atomic_write_bytes(path, b"first")
    fs.atomic_write_bytes(path, b"second")
    assert path.read_bytes() == b"second"


def test_ensure_dir(tmp_path):
    d = fs.ensure_dir(tmp_path / "a" / "b")
    assert d.is_dir()
    assert fs.ensure_dir(d) == d


# ============================================================================
# LOGGING TESTS
# ============================================================================

def test_logging_idempotency(tmp_path):
    """Repeated setup_logging() calls don't duplicate file output."""
    log_path = tmp_path / "trace.log"

    errbuf = io.StringIO()
    with contextlib.redirect_stderr(errbuf):
        logging_config.setup_logging(
            log_level="INFO",
            log_file=str(log_path),
            json=True,
            to_stderr=False,
            context={"app": "test"}
        )
        logger = logging_config.get_logger("penpath_test")
        logger.info("hello")

        logging_config.setup_logging(
            log_level="INFO",
            log_file=str(log_path),
            json=True,
            to_stderr=False,
            context={"app": "test"}
        )
        logger.info("world")

    lines = log_path.read_text().strip().splitlines()
    assert len(lines) == 2

    rec = json.loads(lines[0])
    assert rec["msg"] == "hello"
    assert rec["lvl"] == "INFO"
    assert rec.get("app") == "test"


def test_human_format_includes_context():
    logging_config.push_context(image="cat.png")
    formatter = logging_config.ContextFormatter("human", use_color=False)
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "no paths", None, None)

    line = formatter.format(record)

    assert "WARNING" in line
    assert "image=cat.png" in line
    assert line.endswith("no paths")


def test_unknown_format_mode():
    with pytest.raises(ValueError):
        logging_config.ContextFormatter("xml")


def test_pop_context_keys():
    logging_config.push_context(app="trace", image="a.png")
    logging_config.pop_context(["image"])

    formatter = logging_config.ContextFormatter("json")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    rec = json.loads(formatter.format(record))

    assert rec["app"] == "trace"
    assert "image" not in rec


def test_unknown_rotation_mode(tmp_path):
    with pytest.raises(ValueError, match="rotation"):
        logging_config.setup_logging(
            log_file=str(tmp_path / "x.log"),
            to_stderr=False,
            rotate={"mode": "weekly"}
        )


# ============================================================================
# PROFILER TESTS
# ============================================================================

def test_profiler_timer():
    times = []
    with profiler.timer("sobel", sink=lambda n, t: times.append((n, t))):
        sum(range(10000))

    assert len(times) == 1
    assert times[0][0] == "sobel"
    assert times[0][1] >= 0


def test_profiler_timer_reports_on_error():
    times = {}
    with pytest.raises(RuntimeError):
        with profiler.timer("boom", sink=times.__setitem__):
            raise RuntimeError("fail")
    assert "boom" in times


def test_logger_sink(caplog):
    sink = profiler.logger_sink(logging.getLogger("penpath.timing"))
    with caplog.at_level(logging.DEBUG, logger="penpath.timing"):
        sink("contours", 0.0125)
    assert "contours: 12.50 ms" in caplog.text


def test_size_rotation_rolls_over(tmp_path):
    log_path = tmp_path / "rotating.log"
    handlers = logging_config.setup_logging(
        log_file=str(log_path),
        to_stderr=False,
        rotate={"mode": "size", "max_bytes": 300, "backup_count": 2},
        capture_warnings=False,
    )
    try:
        assert len(handlers) == 1
        handler = handlers[0]
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert handler.maxBytes == 300
        assert handler.backupCount == 2

        logger = logging_config.get_logger("penpath_rotation")
        for i in range(20):
            logger.info(f"record {i:02d} " + "x" * 40)

        assert log_path.exists()
        assert (tmp_path / "rotating.log.1").exists()
        assert not (tmp_path / "rotating.log.3").exists()
    finally:
        logging_config.setup_logging(to_stderr=False, capture_warnings=False)


def test_time_rotation_handler(tmp_path):
    handlers = logging_config.setup_logging(
        log_file=str(tmp_path / "timed.log"),
        to_stderr=False,
        rotate={"mode": "time", "when": "H", "backup_count": 5},
        capture_warnings=False,
    )
    try:
        handler = handlers[0]
        assert isinstance(handler, logging.handlers.TimedRotatingFileHandler)
        assert handler.when == "H"
        assert handler.backupCount == 5
    finally:
        logging_config.setup_logging(to_stderr=False, capture_warnings=False)
