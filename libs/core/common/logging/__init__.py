"""Centralized structured logging library.

This package provides structured JSON logging for the secret service.

Usage:
    # At service startup
    from libs.core.common.logging import configure_logging
    logger = configure_logging(service_name="secret_service", log_level="INFO")

    # In modules
    from libs.core.common.logging import get_logger, log_with_context
    logger = get_logger(__name__)
    log_with_context(logger, "INFO", "created secret", secret_id=secret.id, ttl_secs=60)

Security:
    Never pass ciphertext or iv as context; ids and ttl only.
"""

from libs.core.common.logging.config import (
    configure_logging,
    get_logger,
    log_with_context,
)
from libs.core.common.logging.formatter import JSONFormatter

__all__ = [
    # Configuration
    "configure_logging",
    "get_logger",
    "log_with_context",
    # Formatter (for advanced usage)
    "JSONFormatter",
]
