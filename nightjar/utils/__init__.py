"""Shared utilities: logging setup and exception hierarchy."""
