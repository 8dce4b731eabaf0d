"""Core errors package.

Exports all core-level error classes for convenient importing.

Usage:
    from casbin_pg_adapter.core.errors import DomainError, PolicyAdapterError
"""

from casbin_pg_adapter.core.errors.adapter_errors import (
    ConfigurationError,
    DuplicatePolicyError,
    InvalidFilterError,
    PolicyAdapterError,
    PolicyQueryError,
    RuleArityError,
    SchemaError,
    StoreUnavailableError,
)
from casbin_pg_adapter.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "PolicyAdapterError",
    "ConfigurationError",
    "InvalidFilterError",
    "RuleArityError",
    "StoreUnavailableError",
    "SchemaError",
    "PolicyQueryError",
    "DuplicatePolicyError",
]
