"""Observability – structured logging helpers."""
from rental_query.observability.logging.factory import configure_logging
from rental_query.observability.logging.processors import (
    get_logger,
    redact_auth_headers,
    redact_headers,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "redact_auth_headers",
    "redact_headers",
]
