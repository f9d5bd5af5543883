"""Application mutations – MutationCoordinator (call-then-reconcile writes)."""
from __future__ import annotations

from typing import Any, Generic, Mapping, TypeVar

from rental_query.adapters.http import TransportResponse
from rental_query.application.cache import QueryCache
from rental_query.application.query.gateway import ResourceGateway
from rental_query.application.query.state import ResourceStore
from rental_query.observability.logging import get_logger

T = TypeVar("T")

__all__ = ["MutationCoordinator"]


class MutationCoordinator(Generic[T]):
    """Create, update, patch and delete for one resource.

    Every successful write clears the resource's :class:`QueryCache`
    wholesale and reconciles the held list and focus by id. A failed write
    sets ``error`` on the store and leaves local state untouched; nothing
    is retried.
    """

    def __init__(self, gateway: ResourceGateway, store: ResourceStore[T], cache: QueryCache[T]) -> None:
        self._gateway = gateway
        self._store = store
        self._cache = cache
        self._definition = gateway.definition
        self._log = get_logger(__name__, resource=self._definition.name)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def create(self, data: Mapping[str, Any]) -> T | None:
        """POST to the list endpoint; the new item is prepended and focused."""
        response = await self._dispatch("create", "POST", self._definition.list_path(), data)
        if response is None:
            return None
        item = self._item_from(response, data)
        self._store.prepend(item)
        self._store.set_focus(item)
        self._store.succeed()
        return item

    async def update(self, identifier: Any, data: Mapping[str, Any]) -> T | None:
        """PUT (full replace)."""
        response = await self._dispatch("update", "PUT", self._definition.detail_path(identifier), data, identifier)
        if response is None:
            return None
        item = self._store.replace(self._item_from(response, data), identifier=identifier)
        self._store.succeed()
        return item

    async def patch(self, identifier: Any, data: Mapping[str, Any]) -> T | None:
        """PATCH; returned fields are merged over the held copy."""
        response = await self._dispatch("patch", "PATCH", self._definition.detail_path(identifier), data, identifier)
        if response is None:
            return None
        item = self._store.replace(self._item_from(response, data), identifier=identifier, merge=True)
        self._store.succeed()
        return item

    async def delete(self, identifier: Any) -> bool:
        """DELETE; soft-delete resources keep the item with overridden fields."""
        response = await self._dispatch("delete", "DELETE", self._definition.detail_path(identifier), None, identifier)
        if response is None:
            return False
        if self._definition.soft_delete:
            self._store.replace(dict(self._definition.soft_delete), identifier=identifier, merge=True)
        else:
            self._store.remove(identifier)
        self._store.succeed()
        return True

    async def action(
        self,
        operation: str,
        method: str,
        path: str,
        data: Mapping[str, Any] | None = None,
    ) -> TransportResponse | None:
        """Run a resource-specific write (``mark-as-read`` etc.).

        Same bookkeeping as the CRUD calls; reconciling local state is up
        to the caller.
        """
        response = await self._dispatch(operation, method, path, data)
        if response is not None:
            self._store.succeed()
        return response

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _dispatch(
        self,
        operation: str,
        method: str,
        path: str,
        data: Mapping[str, Any] | None,
        identifier: Any = None,
    ) -> TransportResponse | None:
        self._store.begin()
        try:
            response = await self._gateway.call(method, path, data)
        except BaseException:
            self._store.settle()
            raise
        if not response.success:
            message = response.error or self._fallback_message(operation, identifier)
            self._log.warning(
                "mutation.failed",
                operation=operation,
                endpoint=path,
                status=response.status,
                error=message,
            )
            self._store.fail(message)
            return None
        invalidated = self._cache.clear()
        self._log.info(
            "mutation.succeeded",
            operation=operation,
            endpoint=path,
            status=response.status,
            invalidated=invalidated,
        )
        return response

    def _item_from(self, response: TransportResponse, sent: Mapping[str, Any]) -> Any:
        # 204 / empty bodies fall back to what was sent
        if response.data in (None, "", {}):
            return dict(sent)
        return self._definition.detail_transform(response.data)

    def _fallback_message(self, operation: str, identifier: Any) -> str:
        target = self._definition.name if identifier is None else f"{self._definition.name} {identifier}"
        return f"Failed to {operation} {target}"
