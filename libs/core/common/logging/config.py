"""Logging configuration helpers."""

from __future__ import annotations

import logging
import sys
from typing import Any

from libs.core.common.logging.formatter import JSONFormatter

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_HANDLER_MARKER = "_configured_by_service"


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    json_output: bool = True,
) -> logging.Logger:
    """
    Configure the root logger for a service.

    Replaces the handler installed by a previous call so repeated calls
    (tests, reloads) do not duplicate output. Handlers installed by anything
    else (pytest, uvicorn) are left alone.

    Args:
        service_name: Name stamped on every JSON record
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines when True, plain text otherwise

    Returns:
        Logger named after the service.
    """
    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JSONFormatter(service_name))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    setattr(handler, _HANDLER_MARKER, True)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level.upper())

    return logging.getLogger(service_name)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: str, message: str, **context: Any) -> None:
    """Log ``message`` with keyword arguments attached as structured context."""
    logger.log(logging.getLevelName(level.upper()), message, extra=context)
