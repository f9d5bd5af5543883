"""Resources – FavouriteSet, optimistic favourite membership for one user."""
from __future__ import annotations

from typing import Any, Callable

from rental_query.application.mutations import StoreUpdate, run_optimistic
from rental_query.application.pagination import PaginatedResult
from rental_query.application.query.engine import ResourceQueryEngine
from rental_query.kernel.errors import EnvelopeError, UnauthenticatedError
from rental_query.resources.transforms import geojson_envelope

__all__ = ["LOGIN_REQUIRED", "FavouriteSet"]

LOGIN_REQUIRED = "Please log in to manage favourites"

ADD = "add-favourite/"
REMOVE = "remove-favourite/"
TOP_PROPERTIES = "top-properties/"

Favourite = dict[str, Any]
UserIdGetter = Callable[[], Any]


class FavouriteSet(ResourceQueryEngine[Favourite]):
    """The signed-in user's favourites, keyed by property id.

    ``add_favourite`` and ``remove_favourite`` change local membership (and
    the pagination ``count``) before the request is sent and roll back if it
    fails. A rollback reverts only its own change, so an overlapping add and
    remove keep whichever of them the server confirmed. Both are no-ops
    returning ``True`` when membership already matches, so a second
    ``add_favourite(5)`` issued while the first is in flight sends nothing.
    """

    def __init__(self, *args: Any, user_id: UserIdGetter | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._user_id: UserIdGetter = user_id or (lambda: None)
        self._top_properties: tuple[dict[str, Any], ...] = ()

    @property
    def favourites(self) -> tuple[Favourite, ...]:
        return self.items

    @property
    def property_ids(self) -> frozenset[Any]:
        return frozenset(self._store.id_of(favourite) for favourite in self.items)

    @property
    def top_properties(self) -> tuple[dict[str, Any], ...]:
        return self._top_properties

    def is_favourite(self, property_id: Any) -> bool:
        return self._store.find(property_id) is not None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def refresh(self, use_cache: bool = False) -> PaginatedResult[Favourite] | None:
        """Reload the user's favourites; signed out clears them."""
        user_id = self._user_id()
        if user_id is None:
            self._store.clear_list()
            return None
        return await self.fetch_list({"user_id": user_id}, use_cache)

    async def fetch_top_properties(self) -> tuple[dict[str, Any], ...] | None:
        """Most-favourited properties across all users."""
        response = await self._read(
            self.definition.list_path(TOP_PROPERTIES),
            failure="Failed to fetch top properties",
        )
        if response is None:
            self._top_properties = ()
            return None
        try:
            self._top_properties = geojson_envelope(response.data).items
        except EnvelopeError as exc:
            self._log.warning("query.fetch_failed", endpoint=TOP_PROPERTIES, error=exc.message)
            self._store.set_error(exc.message)
            self._top_properties = ()
            return None
        return self._top_properties

    # ------------------------------------------------------------------
    # Optimistic membership
    # ------------------------------------------------------------------

    async def add_favourite(self, property_id: Any) -> bool:
        user_id = self._require_user()
        if user_id is None:
            return False
        if self.is_favourite(property_id):
            return True
        placeholder: Favourite = {"id": None, "user": user_id, "property": property_id}
        return await self._toggle(
            "add favourite",
            ADD,
            "POST",
            property_id,
            StoreUpdate.appending(self._store, placeholder),
            failure="Failed to add to favourites",
        )

    async def remove_favourite(self, property_id: Any) -> bool:
        user_id = self._require_user()
        if user_id is None:
            return False
        if not self.is_favourite(property_id):
            return True
        return await self._toggle(
            "remove favourite",
            REMOVE,
            "DELETE",
            property_id,
            StoreUpdate.removing(self._store, property_id),
            failure="Failed to remove from favourites",
        )

    async def toggle_favourite(self, property_id: Any) -> bool:
        if self.is_favourite(property_id):
            return await self.remove_favourite(property_id)
        return await self.add_favourite(property_id)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _require_user(self) -> Any:
        user_id = self._user_id()
        if user_id is None:
            error = UnauthenticatedError(LOGIN_REQUIRED)
            self._log.info("mutation.failed", **error.to_dict())
            self._store.set_error(error.message)
        return user_id

    async def _toggle(
        self,
        operation: str,
        action: str,
        method: str,
        property_id: Any,
        update: StoreUpdate[Favourite],
        *,
        failure: str,
    ) -> bool:
        path = self.definition.list_path(action)
        payload = {"user_id": self._user_id(), "property_id": property_id}
        self._store.begin()
        try:
            response = await run_optimistic(update, lambda: self._gateway.call(method, path, payload))
        except BaseException:
            self._store.settle()
            raise
        log = self._log.bind(operation=operation, endpoint=path, property_id=property_id)
        if not response.success:
            message = response.error or failure
            log.warning("mutation.rolled_back", status=response.status, error=message)
            self._store.fail(message)
            return False
        if method == "POST" and isinstance(response.data, dict) and response.data:
            self._store.replace(response.data, identifier=property_id)
        invalidated = self._cache.clear()
        log.info("mutation.succeeded", status=response.status, invalidated=invalidated)
        self._store.succeed()
        return True
