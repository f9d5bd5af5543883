"""Domain errors: malformed query intent and missing resources."""

from __future__ import annotations

from typing import Any

from rental_query.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when query or mutation input breaks a rule of the engine."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class FilterValidationError(ValidationError):
    """A filter value has a shape the normalizer cannot flatten."""

    default_code = "invalid_filter"

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(
            f"Filter '{name}' has an unsupported value {value!r}",
            errors=[{"field": name, "value": repr(value)}],
        )
        self.name = name
        self.value = value


class NotFoundError(DomainError):
    """The requested resource is not registered or does not exist."""

    default_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


__all__ = [
    "DomainError",
    "FilterValidationError",
    "NotFoundError",
    "ValidationError",
]
