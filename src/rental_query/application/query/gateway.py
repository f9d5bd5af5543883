"""Application query – ResourceGateway, the engine's view of the transport."""
from __future__ import annotations

from typing import Any, Mapping

from rental_query.adapters.auth import AuthHeaderProvider, NoAuth
from rental_query.adapters.http import Transport, TransportResponse
from rental_query.application.query.definition import ResourceDefinition

__all__ = ["ResourceGateway"]


class ResourceGateway:
    """Binds a transport and an auth header provider to one resource.

    Headers are produced per call and passed through untouched.
    """

    def __init__(
        self,
        definition: ResourceDefinition,
        transport: Transport,
        auth: AuthHeaderProvider | None = None,
    ) -> None:
        self.definition = definition
        self._transport = transport
        self._auth: AuthHeaderProvider = auth or NoAuth()

    async def call(
        self,
        method: str,
        path: str,
        data: Mapping[str, Any] | None = None,
    ) -> TransportResponse:
        return await self._transport.request(method, path, data, dict(self._auth()))

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> TransportResponse:
        return await self.call("GET", path, params)
