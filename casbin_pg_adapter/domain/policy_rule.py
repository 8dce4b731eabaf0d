"""PolicyRule value object.

One persisted rule row: a type tag plus six positional field slots.

Policy Examples:
    Permission rule (ptype='p'):
        ptype='p', fields=('admin', 'users', 'write', '', '', '')
        Means: admin role can write to users resource

    Role grouping (ptype='g'):
        ptype='g', fields=('alice', 'admin', '', '', '', '')
        Means: alice inherits the admin role

Empty string marks an unset slot. Absence is positional: rules are appended
left to right, so a rule using v2 always uses v0 and v1 as well.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from casbin_pg_adapter.core.constants import FIELD_COLUMNS, PTYPE_COLUMN


@dataclass(frozen=True, slots=True, kw_only=True)
class PolicyRule:
    """One row of the rule table.

    The combination (ptype, fields) is the natural key; `id` is a surrogate
    assigned by the store and carries no policy meaning.

    Attributes:
        ptype: Rule type tag ("p", "g", "g2", ...).
        fields: Exactly six field values, "" for unset slots.
        id: Surrogate key, None for rules not read from the store.
    """

    ptype: str
    fields: tuple[str, str, str, str, str, str]
    id: int | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PolicyRule":
        """Build a rule from a result row mapping.

        NULL columns are read as empty strings.

        Args:
            row: Mapping with "p_type", "v0".."v5" and optionally "id".

        Returns:
            PolicyRule: The rule held by the row.
        """
        values = tuple(row.get(column) or "" for column in FIELD_COLUMNS)
        return cls(
            id=row.get("id"),
            ptype=row.get(PTYPE_COLUMN) or "",
            fields=values,  # type: ignore[arg-type]
        )

    def __repr__(self) -> str:
        v0, v1, v2, v3, v4, v5 = self.fields
        return (
            f"<PolicyRule(ptype={self.ptype}, "
            f"v0={v0}, v1={v1}, v2={v2}, "
            f"v3={v3}, v4={v4}, v5={v5})>"
        )
