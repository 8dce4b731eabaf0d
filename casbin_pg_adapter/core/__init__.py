"""Core layer: configuration, constants, errors, and Result types."""
