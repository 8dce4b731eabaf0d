"""Domain layer: policy rule value objects and protocols.

Nothing here knows about SQL, SQLAlchemy, or the casbin library.
"""

from casbin_pg_adapter.domain.policy_filter import Filter
from casbin_pg_adapter.domain.policy_rule import PolicyRule

__all__ = ["Filter", "PolicyRule"]
