"""Infrastructure errors: transport failures."""

from __future__ import annotations

from typing import Any

from rental_query.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class TransportError(InfrastructureError):
    """A request to the remote API failed.

    ``status_code`` is ``None`` for network-level failures (DNS, connect,
    timeout) and the HTTP status otherwise.
    """

    default_code = "transport_error"

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.method = method
        self.endpoint = endpoint
        self.status_code = status_code

    @property
    def is_retryable(self) -> bool:
        return self.status_code is None or self.status_code >= 500


class EnvelopeError(InfrastructureError):
    """A successful response body does not have the shape the resource expects."""

    default_code = "malformed_envelope"

    def __init__(self, reason: str, *, resource: str | None = None, **kwargs: Any) -> None:
        label = f"{resource} response" if resource else "response"
        super().__init__(f"Unexpected {label}: {reason}", **kwargs)
        self.resource = resource
        self.reason = reason


__all__ = ["EnvelopeError", "InfrastructureError", "TransportError"]
