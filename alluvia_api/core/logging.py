"""Structured logging setup using structlog.

`configure_logging` is called once by the app factory; modules obtain
loggers through `get_logger(__name__)` and log key-value events.
"""

import logging
import sys
import threading
from typing import Any, Set

import structlog

_once_lock = threading.Lock()
_once_keys: Set[str] = set()


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog on top of the standard library logger.

    Args:
        level: Root log level name (DEBUG, INFO, ...)
        json_logs: Render one JSON object per line instead of console output
    """
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_once(key: str, logger: structlog.stdlib.BoundLogger, event: str, **kwargs: Any) -> bool:
    """
    Emit a debug event at most once per process for the given key.

    Returns:
        True if the event was emitted by this call
    """
    with _once_lock:
        if key in _once_keys:
            return False
        _once_keys.add(key)
    logger.debug(event, **kwargs)
    return True
