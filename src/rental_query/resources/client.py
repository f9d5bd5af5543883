"""Resources – RentalQueryClient and build_client.

Wires one transport and one auth provider into the five resource engines::

    settings = SettingsFactory.create(ClientSettings, EnvSettingsLoader())
    async with build_client(settings, token_getter=session.token, user_id=session.user_id) as client:
        await client.properties.fetch_list({"min_price": 50000})
        await client.favourites.toggle_favourite(42)
"""
from __future__ import annotations

from typing import Any, Callable

from rental_query.adapters.auth import AuthHeaderProvider, BearerTokenAuth, NoAuth
from rental_query.adapters.http import HttpxTransport, RetryingHttpxTransport, Transport
from rental_query.config import ClientSettings
from rental_query.kernel.time import Clock
from rental_query.observability.logging import configure_logging, get_logger
from rental_query.resources.definitions import (
    DEFAULT_TTLS,
    ENQUIRIES,
    FAVOURITES,
    PROPERTIES,
    REVIEWS,
    USERS,
    with_overrides,
)
from rental_query.resources.enquiries import EnquiryClient
from rental_query.resources.favourites import FavouriteSet
from rental_query.resources.properties import PropertyClient
from rental_query.resources.reviews import ReviewClient
from rental_query.resources.users import UserClient

__all__ = ["RentalQueryClient", "build_client"]

logger = get_logger(__name__)


class RentalQueryClient:
    """One engine per resource type over a shared transport.

    Engines never share caches or state. When ``owns_transport`` is true
    the transport is closed by :meth:`aclose` / ``async with``.
    """

    def __init__(
        self,
        transport: Transport,
        auth: AuthHeaderProvider | None = None,
        *,
        user_id: Callable[[], Any] | None = None,
        clock: Clock | None = None,
        ttls: dict[str, float] | None = None,
        debounce_seconds: float = 0.3,
        default_page_size: int = 20,
        owns_transport: bool = False,
    ) -> None:
        self._transport = transport
        self._owns_transport = owns_transport
        ttls = ttls or {}
        options: dict[str, Any] = {
            "clock": clock,
            "debounce_seconds": debounce_seconds,
            "default_page_size": default_page_size,
        }
        self.properties = PropertyClient(with_overrides(PROPERTIES, ttls), transport, auth, **options)
        self.users = UserClient(with_overrides(USERS, ttls), transport, auth, **options)
        self.enquiries = EnquiryClient(
            with_overrides(ENQUIRIES, ttls),
            transport,
            auth,
            messages_ttl=ttls.get("enquiry_messages", DEFAULT_TTLS["enquiry_messages"]),
            **options,
        )
        self.reviews = ReviewClient(with_overrides(REVIEWS, ttls), transport, auth, **options)
        self.favourites = FavouriteSet(with_overrides(FAVOURITES, ttls), transport, auth, user_id=user_id, **options)

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def engines(self) -> tuple[Any, ...]:
        return (self.properties, self.users, self.enquiries, self.reviews, self.favourites)

    def clear_caches(self) -> int:
        return sum(engine.clear_cache() for engine in self.engines)

    async def aclose(self) -> None:
        if self._owns_transport:
            aclose = getattr(self._transport, "aclose", None)
            if aclose is not None:
                await aclose()

    async def __aenter__(self) -> "RentalQueryClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()


def build_client(
    settings: ClientSettings,
    *,
    token_getter: Callable[[], str | None] | None = None,
    user_id: Callable[[], Any] | None = None,
    auth: AuthHeaderProvider | None = None,
    clock: Clock | None = None,
    configure_logs: bool = True,
) -> RentalQueryClient:
    """Build a :class:`RentalQueryClient` from *settings*.

    Uses :class:`RetryingHttpxTransport` when ``max_attempts > 1``. *auth*
    wins over *token_getter*; with neither, requests are anonymous.
    """
    if configure_logs:
        configure_logging(settings.log_level, json=settings.log_json)
    transport: HttpxTransport
    if settings.max_attempts > 1:
        transport = RetryingHttpxTransport(
            settings.base_url,
            settings.timeout_seconds,
            max_attempts=settings.max_attempts,
        )
    else:
        transport = HttpxTransport(settings.base_url, settings.timeout_seconds)
    if auth is None:
        auth = BearerTokenAuth(token_getter) if token_getter is not None else NoAuth()
    logger.info(
        "client.built",
        base_url=settings.base_url,
        max_attempts=settings.max_attempts,
        ttl_overrides=settings.ttl_map(),
    )
    return RentalQueryClient(
        transport,
        auth,
        user_id=user_id,
        clock=clock,
        ttls=settings.ttl_map(),
        debounce_seconds=settings.debounce_seconds,
        default_page_size=settings.default_page_size,
        owns_transport=True,
    )
