"""Logging infrastructure (structlog adapters)."""
