"""Core enums package.

Exports all core-level enums for convenient importing.

Usage:
    from casbin_pg_adapter.core.enums import ErrorCode
"""

from casbin_pg_adapter.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode"]
