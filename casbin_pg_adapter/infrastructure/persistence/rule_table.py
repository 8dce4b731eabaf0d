"""Rule table definition.

The table name is configurable (and optionally prefixed), so the table is
built per adapter with SQLAlchemy Core instead of a declarative model.

Fields:
    id: Auto-incrementing BIGINT primary key (surrogate, unused by policy)
    p_type: Policy type ('p' for permission, 'g' for grouping, ...)
    v0-v5: Policy values (meaning depends on p_type)

Unused value columns default to '' rather than NULL so the unique index over
(p_type, v0..v5) also rejects duplicates of short rules; PostgreSQL treats
NULLs as distinct in unique indexes.
"""

from sqlalchemy import BigInteger, Column, Index, MetaData, String, Table

from casbin_pg_adapter.core.config import validate_identifier
from casbin_pg_adapter.core.constants import (
    FIELD_COLUMNS,
    PTYPE_COLUMN,
    RULE_COLUMNS,
    RULE_VALUE_LENGTH,
)


def unique_index_name(table_name: str) -> str:
    """Name of the unique rule index for a table."""
    return f"uq_{table_name}_rule"


def build_rule_table(table_name: str, metadata: MetaData | None = None) -> Table:
    """Build the rule table for a validated table name.

    Args:
        table_name: Fully qualified (prefixed) table name.
        metadata: MetaData to attach to (a fresh one by default).

    Returns:
        Table: Rule table with its unique index.

    Raises:
        ValueError: If the table name is not a safe identifier.
    """
    validate_identifier(table_name, field="table_name")
    value_columns = [
        Column(
            name,
            String(RULE_VALUE_LENGTH),
            nullable=True,
            server_default="",
        )
        for name in (PTYPE_COLUMN, *FIELD_COLUMNS)
    ]
    return Table(
        table_name,
        metadata if metadata is not None else MetaData(),
        Column("id", BigInteger, primary_key=True, autoincrement=True),
        *value_columns,
        Index(unique_index_name(table_name), *RULE_COLUMNS, unique=True),
    )
