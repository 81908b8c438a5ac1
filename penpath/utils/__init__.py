"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config and path schemas (validators)
    - Polyline geometry and path metrics (geometry)
    - Atomic YAML I/O (fs)
    - Unified logging (logging_config)
    - Stage timing (profiler)

No module in utils/ may import from data_pipeline/.

Convenience imports:
    from penpath.utils import geometry, validators
    from penpath.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import geometry
from . import logging_config
from . import profiler
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'fs',
    'geometry',
    'logging_config',
    'profiler',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
