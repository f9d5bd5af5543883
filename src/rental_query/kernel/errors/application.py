"""Application-layer errors: wiring and session concerns."""

from __future__ import annotations

from rental_query.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnauthenticatedError(ApplicationError):
    """An operation needs a signed-in user and none is available."""

    default_code = "unauthenticated"


__all__ = ["ApplicationError", "UnauthenticatedError"]
