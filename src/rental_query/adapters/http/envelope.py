"""HTTP adapter – the uniform response envelope and Transport port."""
from __future__ import annotations

import dataclasses
from typing import Any, Mapping, Protocol, runtime_checkable

__all__ = ["Transport", "TransportResponse"]


@dataclasses.dataclass(frozen=True)
class TransportResponse:
    """``{data, status, success, error}`` envelope returned by every transport."""

    data: Any
    status: int
    success: bool
    error: str | None = None

    @classmethod
    def ok(cls, data: Any, status: int = 200) -> "TransportResponse":
        return cls(data=data, status=status, success=True)

    @classmethod
    def failure(cls, error: str, status: int = 500, data: Any = None) -> "TransportResponse":
        return cls(data=data if data is not None else {}, status=status, success=False, error=error)


@runtime_checkable
class Transport(Protocol):
    """Port: performs one request against the remote API.

    GET requests pass *data* as query parameters; other methods send it as
    the request body. Implementations report failures through the envelope
    and do not raise.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse: ...
