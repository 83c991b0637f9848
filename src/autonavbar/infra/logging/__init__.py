from __future__ import annotations

from .config import ROOT_LOGGER_NAME, TRACE, LoggingConfig
from .core import (
    configure_logging,
    get_logger,
    parse_level,
    run_log_level,
    shutdown_logging,
)
from .handlers import RunLevelFilter, current_run_level

__all__ = [
    "LoggingConfig",
    "ROOT_LOGGER_NAME",
    "RunLevelFilter",
    "TRACE",
    "configure_logging",
    "current_run_level",
    "get_logger",
    "parse_level",
    "run_log_level",
    "shutdown_logging",
]
