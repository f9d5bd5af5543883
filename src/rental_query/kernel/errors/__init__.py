"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   ├── ValidationError
    │   │   └── FilterValidationError
    │   └── NotFoundError
    ├── ApplicationError         (application.py)
    │   ├── UnauthenticatedError
    │   └── ConfigError          (rental_query.config.validation)
    └── InfrastructureError      (infrastructure.py)
        ├── TransportError
        └── EnvelopeError
"""

from rental_query.kernel.errors.application import ApplicationError, UnauthenticatedError
from rental_query.kernel.errors.base import BaseError
from rental_query.kernel.errors.domain import (
    DomainError,
    FilterValidationError,
    NotFoundError,
    ValidationError,
)
from rental_query.kernel.errors.infrastructure import EnvelopeError, InfrastructureError, TransportError

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "EnvelopeError",
    "FilterValidationError",
    "InfrastructureError",
    "NotFoundError",
    "TransportError",
    "UnauthenticatedError",
    "ValidationError",
]
