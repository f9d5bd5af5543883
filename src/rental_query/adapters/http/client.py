"""HTTP adapter – HttpxTransport."""
from __future__ import annotations

from typing import Any, Mapping

import httpx

from rental_query.adapters.http.envelope import TransportResponse
from rental_query.kernel.errors import TransportError
from rental_query.observability.logging import get_logger

logger = get_logger(__name__)

_MISSING_BASE_URL = "API configuration error: base URL is undefined"


def _error_message(response: httpx.Response) -> str:
    """Pick ``detail`` then ``message`` from a JSON error body, else the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping):
        for key in ("detail", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


def _decode(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpxTransport:
    """Async httpx transport that converts every failure into an envelope.

    The underlying :class:`httpx.AsyncClient` is owned by this object and is
    released by :meth:`aclose` or by leaving ``async with``.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        *,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        self._base_url = base_url
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    async def __aenter__(self) -> "HttpxTransport":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        if not self._base_url and not str(self._client.base_url):
            logger.error("transport.misconfigured", method=method, endpoint=endpoint)
            return TransportResponse.failure(_MISSING_BASE_URL)
        try:
            return await self._send(method.upper(), endpoint, data, headers)
        except TransportError as exc:
            logger.warning(
                "transport.request_failed",
                method=method,
                endpoint=endpoint,
                status=exc.status_code,
                error=exc.message,
            )
            return TransportResponse.failure(exc.message, status=exc.status_code or 500)

    async def _send(
        self,
        method: str,
        endpoint: str,
        data: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
    ) -> TransportResponse:
        """Perform the call; raises :class:`TransportError` on any failure."""
        kwargs: dict[str, Any] = {"headers": dict(headers or {})}
        if data is not None:
            if method == "GET":
                kwargs["params"] = {k: _param(v) for k, v in data.items()}
            else:
                kwargs["json"] = dict(data)
        logger.debug("transport.request", method=method, endpoint=endpoint, headers=kwargs["headers"])
        try:
            response = await self._client.request(method, endpoint, **kwargs)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"Request timed out: {method} {endpoint}", method=method, endpoint=endpoint, cause=exc
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or type(exc).__name__, method=method, endpoint=endpoint, cause=exc) from exc
        if response.is_error:
            raise TransportError(
                _error_message(response),
                method=method,
                endpoint=endpoint,
                status_code=response.status_code,
            )
        return TransportResponse.ok(_decode(response), status=response.status_code)


def _param(value: Any) -> Any:
    # httpx renders Python booleans as "True"/"False"; the API expects lowercase
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


__all__ = ["HttpxTransport"]
