"""Shared pytest configuration."""

pytest_plugins = ["rental_query.testing.fixtures"]
