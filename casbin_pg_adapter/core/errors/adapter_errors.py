"""Exceptions raised at the casbin adapter boundary.

The casbin enforcer calls adapters directly and expects failures to be
raised, so this is where `Failure` values from the store become exceptions.

Error Hierarchy:
    PolicyAdapterError
    ├── ConfigurationError (bad settings, never attempted)
    │   ├── InvalidFilterError (filter is not a Filter)
    │   └── RuleArityError (more than 6 fields)
    ├── StoreUnavailableError (cannot reach store, or adapter closed)
    ├── SchemaError (table/database provisioning failed)
    └── PolicyQueryError (query or statement failed)
        └── DuplicatePolicyError (unique rule index violated)
"""

from typing import Any

from casbin_pg_adapter.core.enums import ErrorCode


class PolicyAdapterError(Exception):
    """Base exception for all adapter failures.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable message.
        details: Optional structured context.
    """

    default_code: ErrorCode = ErrorCode.POLICY_LOAD_FAILED

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ConfigurationError(PolicyAdapterError):
    """Malformed adapter configuration or constructor parameters."""

    default_code = ErrorCode.INVALID_CONFIGURATION


class InvalidFilterError(ConfigurationError):
    """Filter passed to load_filtered_policy is not a Filter."""

    default_code = ErrorCode.INVALID_FILTER


class RuleArityError(ConfigurationError):
    """Rule has more positional fields than the table can hold."""

    default_code = ErrorCode.INVALID_RULE_ARITY


class StoreUnavailableError(PolicyAdapterError):
    """Store cannot be reached, or the adapter was already closed."""

    default_code = ErrorCode.STORE_UNAVAILABLE


class SchemaError(PolicyAdapterError):
    """Rule table or database could not be created."""

    default_code = ErrorCode.SCHEMA_SETUP_FAILED


class PolicyQueryError(PolicyAdapterError):
    """A policy query or statement failed."""


class DuplicatePolicyError(PolicyQueryError):
    """Rule already exists (unique index over p_type, v0..v5)."""

    default_code = ErrorCode.POLICY_ALREADY_EXISTS
