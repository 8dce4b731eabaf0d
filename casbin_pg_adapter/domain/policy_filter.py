"""Filter for loading a subset of stored rules.

Each attribute lists the acceptable values for one rule column. An empty
list leaves that column unconstrained. Non-empty columns combine with AND:
a row is loaded only if every constrained column holds one of its values.

Usage:
    # All "p" rules for the admin or auditor roles
    Filter(ptype=["p"], v0=["admin", "auditor"])
"""

from dataclasses import dataclass, field

from casbin_pg_adapter.core.constants import RULE_COLUMNS


@dataclass(slots=True, kw_only=True)
class Filter:
    """Per-column value constraints for load_filtered_policy.

    Attributes:
        ptype: Acceptable rule type tags.
        v0: Acceptable values of field 0.
        v1: Acceptable values of field 1.
        v2: Acceptable values of field 2.
        v3: Acceptable values of field 3.
        v4: Acceptable values of field 4.
        v5: Acceptable values of field 5.
    """

    ptype: list[str] = field(default_factory=list)
    v0: list[str] = field(default_factory=list)
    v1: list[str] = field(default_factory=list)
    v2: list[str] = field(default_factory=list)
    v3: list[str] = field(default_factory=list)
    v4: list[str] = field(default_factory=list)
    v5: list[str] = field(default_factory=list)

    def constraints(self) -> list[tuple[str, list[str]]]:
        """Return (column, values) for every constrained column, in column order."""
        values = [self.ptype, self.v0, self.v1, self.v2, self.v3, self.v4, self.v5]
        return [
            (column, list(candidates))
            for column, candidates in zip(RULE_COLUMNS, values, strict=True)
            if candidates
        ]

    def is_empty(self) -> bool:
        """True when no column is constrained."""
        return not self.constraints()
