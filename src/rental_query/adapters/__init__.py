"""Adapters – transport and authentication boundaries."""
