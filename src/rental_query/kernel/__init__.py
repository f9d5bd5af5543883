"""Kernel – errors and clock shared by every layer."""
