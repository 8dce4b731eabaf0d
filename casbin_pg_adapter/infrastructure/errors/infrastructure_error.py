"""Infrastructure layer error types.

Infrastructure errors represent failures in the relational store.

Architecture:
- The store catches driver exceptions and maps them to DatabaseError
- Infrastructure errors inherit from DomainError (not Exception)
- Used with Result types for error propagation
"""

from dataclasses import dataclass
from typing import Any

from casbin_pg_adapter.core.errors import DomainError
from casbin_pg_adapter.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        code: Adapter ErrorCode describing the failed operation.
        message: Human-readable message.
        infrastructure_code: What went wrong in the store.
        details: Additional context.
    """

    infrastructure_code: InfrastructureErrorCode | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class DatabaseError(InfrastructureError):
    """Database-specific errors.

    Wraps SQLAlchemy/driver exceptions with a consistent shape.

    Attributes:
        code: Adapter ErrorCode.
        message: Human-readable message.
        infrastructure_code: Database-specific error code.
        details: Additional context (operation, original error type).
    """

    pass
