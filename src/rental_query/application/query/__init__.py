"""Application query – resource definitions, observable store and the query engine.

The engine itself lives in :mod:`rental_query.application.query.engine`
(it composes the mutation coordinator, which builds on this package).
"""
from rental_query.application.query.debounce import Debouncer
from rental_query.application.query.definition import IdGetter, ResourceDefinition, SortOption, item_id
from rental_query.application.query.envelope import (
    EnvelopeTransform,
    ItemTransform,
    identity,
    paginated_envelope,
    split_envelope,
)
from rental_query.application.query.gateway import ResourceGateway
from rental_query.application.query.state import (
    EngineStatus,
    ResourceStore,
    StoreListener,
    StoreSnapshot,
    same_id,
)

__all__ = [
    "Debouncer",
    "EngineStatus",
    "EnvelopeTransform",
    "IdGetter",
    "ItemTransform",
    "ResourceDefinition",
    "ResourceGateway",
    "ResourceStore",
    "SortOption",
    "StoreListener",
    "StoreSnapshot",
    "identity",
    "item_id",
    "paginated_envelope",
    "same_id",
    "split_envelope",
]
