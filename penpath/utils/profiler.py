"""Lightweight wall-clock timing for pipeline stages.

Provides:
    - timer(): Context manager with optional sink callback
    - logger_sink(): Sink that reports timings on a logger at DEBUG level

Used to measure the raster stages (grayscale, Sobel, contour traversal,
simplification) so slow inputs show up in debug logs without a profiler.
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Optional


@contextmanager
def timer(name: str, sink: Optional[Callable[[str, float], None]] = None):
    """Context manager for wall-clock timing.

    Parameters
    ----------
    name : str
        Timer name (for logging/display)
    sink : Optional[Callable[[str, float], None]]
        Callback(name, elapsed_seconds); if None the timing is discarded

    Examples
    --------
    >>> timings = {}
    >>> with timer("sobel", sink=timings.__setitem__):
    ...     mask = sobel_edges(gray)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        if sink is not None:
            sink(name, time.perf_counter() - start)


def logger_sink(logger: logging.Logger) -> Callable[[str, float], None]:
    """Build a timer sink that logs "<name>: <ms> ms" at DEBUG."""
    def _sink(name: str, elapsed: float) -> None:
        logger.debug(f"{name}: {elapsed * 1000.0:.2f} ms")
    return _sink
