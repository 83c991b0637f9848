from __future__ import annotations

"""
Logging Handler Factories and Filters.

Tags every handler created here so that reconfiguration only detaches our
own handlers and leaves those installed by a host application (or by pytest)
in place.

The per-run level ('_logLevel') lives in a context variable and is enforced
by RunLevelFilter, so concurrent runs never see each other's verbosity.
"""

import logging
import os
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Optional

from autonavbar.infra.logging.config import ROOT_LOGGER_NAME

_HANDLER_TAG_ATTR: str = "_autonavbar_handler"

_RUN_LEVEL: ContextVar[Optional[int]] = ContextVar("autonavbar_run_level", default=None)


def current_run_level() -> Optional[int]:
    """Level applied by the run active in the current context, if any."""
    return _RUN_LEVEL.get()


class RunLevelFilter(logging.Filter):
    """
    Threshold filter honouring the level of the current run.

    Records of the package loggers are compared against the run level when a
    run has set one; every other record uses the configured base level.
    """

    def __init__(self, base_level: int) -> None:
        super().__init__()
        self.base_level = base_level

    def filter(self, record: logging.LogRecord) -> bool:
        run_level = _RUN_LEVEL.get()
        if run_level is not None and _is_package_record(record):
            return record.levelno >= run_level
        return record.levelno >= self.base_level


def _is_package_record(record: logging.LogRecord) -> bool:
    return record.name == ROOT_LOGGER_NAME or record.name.startswith(ROOT_LOGGER_NAME + ".")


def _tag_handler(handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_stream_handler(level_int: int, formatter: logging.Formatter) -> logging.StreamHandler:
    """Build the tagged stderr handler."""
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level_int)
    sh.setFormatter(formatter)
    _tag_handler(sh)
    return sh


def _create_rotating_file_handler(
        log_file: str,
        level_int: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Build the tagged rotating file handler.

    Args:
        log_file: Target path for the log file.
        level_int: Numeric logging level.
        formatter: Formatter for file entries.
        max_bytes: Rollover threshold in bytes.
        backup_count: Number of rotated files to keep.

    Returns:
        Optional[RotatingFileHandler]: The handler, or None if the file cannot
        be opened (a warning is written to stderr).
    """
    try:
        parent = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(parent, exist_ok=True)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{log_file}': {e}\n")
        return None

    fh.setLevel(level_int)
    fh.setFormatter(formatter)
    _tag_handler(fh)
    return fh
