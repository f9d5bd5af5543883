"""Application mutations – call-then-reconcile writes and optimistic updates."""
from rental_query.application.mutations.coordinator import MutationCoordinator
from rental_query.application.mutations.optimistic import OptimisticUpdate, StoreUpdate, run_optimistic

__all__ = ["MutationCoordinator", "OptimisticUpdate", "StoreUpdate", "run_optimistic"]
