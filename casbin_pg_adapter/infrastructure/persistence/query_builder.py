"""Parameterized SQL fragments for selecting, inserting and deleting rules.

The rule table has no usable key at the call site (the engine only knows
rule values), so rows are selected and deleted by matching column values.
Fragments carry SQLAlchemy named bind placeholders (:p1, :p2, ...) numbered
from 1 in argument order; the asyncpg dialect sends them as $1, $2, ...
Only allow-listed column names ever appear in the SQL text; values are
always bound.

Fragments:
    build_in_clause("v1", ["x", "y"])       -> v1 IN (:p1, :p2)
    build_filter_clause(Filter(...))        -> p_type IN (:p1) AND v0 IN (:p2)
    build_match_clause("p", ["alice"])      -> p_type = :p1 AND v0 = :p2
    build_match_clause("p", {1: "data1"})   -> p_type = :p1 AND v1 = :p2
    build_insert_clause({"p_type": "g", "v0": "alice", "v1": "admin"})
                                            -> (p_type, v0, v1) VALUES (:p1, :p2, :p3)
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from casbin_pg_adapter.core.constants import (
    FIELD_COLUMNS,
    MAX_RULE_FIELDS,
    PTYPE_COLUMN,
    RULE_COLUMNS,
)
from casbin_pg_adapter.core.errors import RuleArityError
from casbin_pg_adapter.domain.policy_filter import Filter

PLACEHOLDER_PREFIX = "p"


def placeholder(position: int) -> str:
    """Bind placeholder for a 1-indexed argument position."""
    return f":{PLACEHOLDER_PREFIX}{position}"


@dataclass(frozen=True, slots=True)
class SqlFragment:
    """SQL text plus its bound arguments.

    Attributes:
        sql: Fragment text with :pN placeholders.
        args: Argument values; args[n - 1] binds :pN.
    """

    sql: str
    args: tuple[str, ...] = ()

    @property
    def params(self) -> dict[str, str]:
        """Bind parameters keyed by placeholder name."""
        return {
            f"{PLACEHOLDER_PREFIX}{position}": value
            for position, value in enumerate(self.args, start=1)
        }

    def __bool__(self) -> bool:
        return bool(self.sql)


def build_in_clause(column: str, values: Sequence[str], start: int = 1) -> SqlFragment:
    """Build `column IN (...)` with one placeholder per candidate value.

    Args:
        column: Rule column name ("p_type", "v0".."v5").
        values: Candidate values, at least one.
        start: Position of the first placeholder.

    Returns:
        SqlFragment: Set-membership fragment and its arguments, in order.

    Raises:
        ValueError: If the column is unknown or there are no candidates.
    """
    if column not in RULE_COLUMNS:
        raise ValueError(f"unknown rule column {column!r}")
    if not values:
        raise ValueError(f"no candidate values for column {column!r}")

    placeholders = ", ".join(
        placeholder(position) for position in range(start, start + len(values))
    )
    return SqlFragment(f"{column} IN ({placeholders})", tuple(values))


def build_filter_clause(rule_filter: Filter) -> SqlFragment:
    """Combine the IN clause of every constrained column with AND.

    Placeholders are numbered continuously across columns.

    Args:
        rule_filter: Per-column constraints.

    Returns:
        SqlFragment: Conjunction, or an empty fragment if nothing is constrained.
    """
    clauses: list[str] = []
    args: list[str] = []
    for column, values in rule_filter.constraints():
        clause = build_in_clause(column, values, start=len(args) + 1)
        clauses.append(clause.sql)
        args.extend(clause.args)
    return SqlFragment(" AND ".join(clauses), tuple(args))


def build_match_clause(
    ptype: str, fields: Sequence[str] | Mapping[int, str]
) -> SqlFragment:
    """Build the equality conjunction identifying rows of one rule.

    A sequence matches by prefix: it constrains v0..v(n-1) and leaves the
    remaining columns free. A mapping constrains exactly the field indexes it
    lists, in ascending order.

    Args:
        ptype: Rule type tag, always bound to :p1.
        fields: Positional values, or field index -> value.

    Returns:
        SqlFragment: `p_type = :p1 [AND vN = :pK ...]` and its arguments.

    Raises:
        RuleArityError: If more than six fields are given, or an index is
            outside 0..5.
    """
    if isinstance(fields, Mapping):
        indexed = sorted(fields.items())
    else:
        indexed = list(enumerate(fields))

    if len(indexed) > MAX_RULE_FIELDS or any(
        not 0 <= index < MAX_RULE_FIELDS for index, _ in indexed
    ):
        raise RuleArityError(
            "rule fields must address columns v0..v5",
            details={"ptype": ptype, "fields": [index for index, _ in indexed]},
        )

    clauses = [f"{PTYPE_COLUMN} = {placeholder(1)}"]
    args = [ptype]
    for index, value in indexed:
        args.append(value)
        clauses.append(f"{FIELD_COLUMNS[index]} = {placeholder(len(args))}")
    return SqlFragment(" AND ".join(clauses), tuple(args))


def project_field_window(field_index: int, field_values: Sequence[str]) -> dict[int, str]:
    """Place filter values onto absolute field indexes.

    Values cover indexes [field_index, field_index + len(field_values)).
    Indexes before field_index are left out rather than filled, and empty
    values are wildcards, so neither constrains the match.

    Args:
        field_index: Field index of the first value.
        field_values: Values for consecutive fields.

    Returns:
        dict[int, str]: Field index -> value for constrained fields only.

    Raises:
        RuleArityError: If the window starts outside 0..5 or runs past v5.
    """
    if not 0 <= field_index < MAX_RULE_FIELDS or (
        field_index + len(field_values) > MAX_RULE_FIELDS
    ):
        raise RuleArityError(
            "field window must stay within v0..v5",
            details={"field_index": field_index, "count": len(field_values)},
        )
    return {
        field_index + offset: value
        for offset, value in enumerate(field_values)
        if value
    }


def build_insert_clause(columns: Mapping[str, str]) -> SqlFragment:
    """Build the `(columns) VALUES (...)` part of an INSERT.

    Args:
        columns: Column name -> value, as produced by encode_rule().

    Returns:
        SqlFragment: Column list and placeholders, arguments in column order.

    Raises:
        ValueError: If a column is not a rule column.
    """
    unknown = [column for column in columns if column not in RULE_COLUMNS]
    if unknown:
        raise ValueError(f"unknown rule columns {unknown!r}")

    names = ", ".join(columns)
    placeholders = ", ".join(placeholder(position) for position in range(1, len(columns) + 1))
    return SqlFragment(f"({names}) VALUES ({placeholders})", tuple(columns.values()))
