"""Observability – structlog processors and the get_logger helper."""
from __future__ import annotations

from typing import Any, Mapping

import structlog

_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})
_REDACTED = "***"


def redact_headers(headers: Mapping[str, Any]) -> dict[str, Any]:
    return {
        name: (_REDACTED if name.lower() in _SENSITIVE_HEADERS else value)
        for name, value in headers.items()
    }


def redact_auth_headers(
    logger: Any,       # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor: masks credentials in a ``headers`` field."""
    headers = event_dict.get("headers")
    if isinstance(headers, Mapping):
        event_dict["headers"] = redact_headers(headers)
    return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger, e.g. ``resource``.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["get_logger", "redact_auth_headers", "redact_headers"]
