"""Observability – structured logging for the query layer."""
