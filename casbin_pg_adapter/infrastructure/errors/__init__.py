"""Infrastructure errors package.

Usage:
    from casbin_pg_adapter.infrastructure.errors import DatabaseError
"""

from casbin_pg_adapter.infrastructure.errors.infrastructure_error import (
    DatabaseError,
    InfrastructureError,
)

__all__ = [
    "InfrastructureError",
    "DatabaseError",
]
