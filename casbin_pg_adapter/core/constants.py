"""Centralized constants for internal implementation details.

These are fixed properties of the rule table layout, NOT environment-specific
configuration. Overridable defaults live in `casbin_pg_adapter/core/config.py`.

Categories:
- Defaults: database and table names used when settings omit them
- Rule layout: column names and the maximum rule arity
- Identifiers: validation pattern and length cap for spliced SQL identifiers
"""

import re

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_DATABASE_NAME: str = "casbin"
"""Database created/used when no database name is configured."""

DEFAULT_TABLE_NAME: str = "casbin_rule"
"""Rule table name used when no table name is configured."""

DEFAULT_DRIVER_NAME: str = "postgresql+asyncpg"
"""SQLAlchemy dialect+driver for the async PostgreSQL store."""


# =============================================================================
# Rule Layout
# =============================================================================

PTYPE_COLUMN: str = "p_type"
"""Column holding the rule type tag ("p", "g", "g2", ...)."""

FIELD_COLUMNS: tuple[str, ...] = ("v0", "v1", "v2", "v3", "v4", "v5")
"""Positional rule field columns, in order."""

RULE_COLUMNS: tuple[str, ...] = (PTYPE_COLUMN, *FIELD_COLUMNS)
"""All logical rule columns (type tag first)."""

MAX_RULE_FIELDS: int = len(FIELD_COLUMNS)
"""Maximum number of positional fields a rule can carry."""

RULE_VALUE_LENGTH: int = 255
"""VARCHAR length of every rule column."""


# =============================================================================
# Identifiers
# =============================================================================

IDENTIFIER_PATTERN: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
"""Allowed shape for table/database names spliced into SQL text."""

MAX_IDENTIFIER_LENGTH: int = 55
"""PostgreSQL truncates identifiers at 63 bytes; leaves room for "uq_..._rule"."""
