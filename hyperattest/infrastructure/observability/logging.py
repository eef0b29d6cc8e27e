"""Structured logging configuration with structlog.

Supports production (JSON) and development (console) output modes.

Log Entry Format (production):
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "attestation_written",
        "correlation_id": "uuid",
        "service": "AttestationWriter",
        ...additional context
    }

Values, ciphertexts and key material are never passed to the logger; log
entries carry subjects, attribute names and sizes only.

Usage:
    from hyperattest.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")  # JSON output
    configure_structlog(environment="development")  # Console output
"""

import logging
import sys
import os
from typing import cast

import structlog
from structlog.typing import Processor

from hyperattest.infrastructure.observability.correlation import (
    correlation_id_processor,
)

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    """Get the configured log level from environment."""
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog for the process.

    Should be called once at startup, before the first attestation write.

    Args:
        environment: 'production' for JSON output, 'development' for console.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger_for_service(
    service_name: str, component: str = "attestation", **context: object
) -> structlog.BoundLogger:
    """Get a logger for an infrastructure adapter.

    Binds the adapter name, its component and fixed context such as a store
    path or calendar URL. Call it from the adapter's __init__, after
    configure_structlog, so the bound logger uses the process configuration.

    Example:
        self._log = get_logger_for_service(
            "SqliteKeyValueStore", component="store", path=self.path
        )
    """
    return structlog.get_logger().bind(
        service=service_name,
        component=component,
        **context,
    )
