"""Auth adapter – header providers attached to every transport call."""
from __future__ import annotations

from typing import Callable, Mapping, Protocol, runtime_checkable

__all__ = ["AuthHeaderProvider", "BearerTokenAuth", "NoAuth"]


@runtime_checkable
class AuthHeaderProvider(Protocol):
    """Port: returns the headers that authenticate the current session."""

    def __call__(self) -> Mapping[str, str]: ...


class BearerTokenAuth:
    """``Authorization: Bearer <token>`` from a token getter.

    The getter is called on every request so a refreshed token is picked up
    without rebuilding the engines. An empty token yields no headers.
    """

    def __init__(self, token_getter: Callable[[], str | None], scheme: str = "Bearer") -> None:
        self._token_getter = token_getter
        self._scheme = scheme

    def __call__(self) -> Mapping[str, str]:
        token = self._token_getter()
        if not token:
            return {}
        return {"Authorization": f"{self._scheme} {token}"}


class NoAuth:
    """Anonymous access."""

    def __call__(self) -> Mapping[str, str]:
        return {}
