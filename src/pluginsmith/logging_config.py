"""Logging setup for the command line entry point.

Modules log through ``logging.getLogger(__name__)`` and inherit this
configuration. The level comes from the CLI flag, then the
``PLUGINSMITH_LOG_LEVEL`` environment variable, then ``WARNING``.
"""

from __future__ import annotations

import logging
import os
import sys

__all__ = ["LOG_LEVEL_ENV", "resolve_level", "setup_logging"]


LOG_LEVEL_ENV = "PLUGINSMITH_LOG_LEVEL"

_FMT_MINIMAL = "%(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT = "%H:%M:%S"


def resolve_level(level: str | None = None) -> int:
    """Return the numeric level for ``level`` or the environment default."""

    name = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"unknown log level '{name}'")
    return numeric


def setup_logging(level: str | None = None) -> None:
    """Send log records to stderr with a format matching the verbosity."""

    numeric_level = resolve_level(level)
    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)
