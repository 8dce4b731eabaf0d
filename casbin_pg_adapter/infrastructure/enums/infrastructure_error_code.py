"""Infrastructure-specific error codes.

Internal codes for tracking store failures. The adapter maps them to an
exception class (and an ErrorCode) at the casbin boundary.
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes."""

    DATABASE_CONNECTION_FAILED = "database_connection_failed"
    DATABASE_CONSTRAINT_VIOLATION = "database_constraint_violation"
    DATABASE_ERROR = "database_error"
    DATABASE_CLOSED = "database_closed"
