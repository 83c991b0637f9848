from __future__ import annotations

"""
Logging Core Orchestrator.

Maintains the idempotent lifecycle of the logging subsystem. Records are
pushed through a QueueHandler and written by a QueueListener thread, so file
I/O never slows down a resolution run.

Thresholds are applied by a RunLevelFilter on the queue handler. A run may
raise or lower the verbosity of 'autonavbar' records ('_logLevel') through a
context variable, so concurrent runs never observe each other's level and
the shared loggers are never mutated per run.
"""

import atexit
import logging
import queue
from contextlib import contextmanager
from logging.handlers import QueueHandler, QueueListener
from typing import Iterator, List, Optional

from autonavbar.infra.logging.config import _LEVEL_MAP, ROOT_LOGGER_NAME, TRACE, LoggingConfig
from autonavbar.infra.logging.handlers import (
    _RUN_LEVEL,
    RunLevelFilter,
    _create_rotating_file_handler,
    _create_stream_handler,
    _is_our_handler,
    _tag_handler,
)

_CONFIGURED_FLAG_ATTR: str = "_autonavbar_configured"
_QUEUE_LISTENER_ATTR: str = "_autonavbar_queue_listener"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once, using non-blocking queue-based I/O.

    Args:
        cfg: Logging settings.
        force: Re-initialize handlers even if logging is already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    already_configured = bool(getattr(root, _CONFIGURED_FLAG_ATTR, False))
    if already_configured and not force:
        return root

    level_int = parse_level(cfg.level)
    root.setLevel(level_int)

    _remove_our_handlers(root)
    _stop_existing_listener(root)

    handlers_list: List[logging.Handler] = []
    if cfg.console:
        handlers_list.append(
            _create_stream_handler(logging.NOTSET, logging.Formatter(cfg.console_fmt))
        )
    if cfg.log_file:
        fh = _create_rotating_file_handler(
            cfg.log_file,
            logging.NOTSET,
            logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
            cfg.max_bytes,
            cfg.backup_count,
        )
        if fh:
            handlers_list.append(fh)

    if not handlers_list:
        return root

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    queue_handler = QueueHandler(log_queue)
    queue_handler.addFilter(RunLevelFilter(level_int))
    _tag_handler(queue_handler)

    listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
    listener.start()
    root.addHandler(queue_handler)
    # Thresholds are enforced by RunLevelFilter from here on
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(TRACE)

    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    atexit.register(_safe_stop_listener, listener)

    return root


def shutdown_logging() -> None:
    """Flush pending records and detach our handlers from the root logger."""
    root = logging.getLogger()
    _stop_existing_listener(root)
    _remove_our_handlers(root)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.NOTSET)
    setattr(root, _CONFIGURED_FLAG_ATTR, False)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def parse_level(level: Optional[str]) -> int:
    """
    Convert a level name ('trace', 'debug', ...) to its numeric value.

    Unknown or empty names map to INFO.
    """
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


@contextmanager
def run_log_level(level: Optional[str]) -> Iterator[Optional[int]]:
    """
    Apply a level to package records emitted from the current context.

    The level lives in a context variable, so it is scoped to the calling
    thread or task and reset on exit, even if the block raises.

    Args:
        level: Level name, or None to keep the configured threshold.

    Yields:
        Optional[int]: The level active inside the block, or None.
    """
    if not level:
        yield _RUN_LEVEL.get()
        return
    token = _RUN_LEVEL.set(parse_level(level))
    try:
        yield _RUN_LEVEL.get()
    finally:
        _RUN_LEVEL.reset(token)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _remove_our_handlers(root: logging.Logger) -> None:
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()


def _stop_existing_listener(root: logging.Logger) -> None:
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener:
        _safe_stop_listener(listener)
        for h in listener.handlers:
            h.close()
        setattr(root, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """Stop a QueueListener, tolerating listeners that were already stopped."""
    if listener is None:
        return
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
