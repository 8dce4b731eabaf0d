"""Infrastructure enums package.

Usage:
    from casbin_pg_adapter.infrastructure.enums import InfrastructureErrorCode
"""

from casbin_pg_adapter.infrastructure.enums.infrastructure_error_code import (
    InfrastructureErrorCode,
)

__all__ = ["InfrastructureErrorCode"]
