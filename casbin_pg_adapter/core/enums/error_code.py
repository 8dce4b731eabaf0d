"""Adapter-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.

Categories:
- Configuration errors (INVALID_*)
- Connectivity errors (STORE_*)
- Schema errors (SCHEMA_*, DATABASE_*)
- Query errors (POLICY_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Adapter-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Configuration errors
    INVALID_CONFIGURATION = "invalid_configuration"
    INVALID_FILTER = "invalid_filter"
    INVALID_RULE_ARITY = "invalid_rule_arity"

    # Connectivity errors
    STORE_UNAVAILABLE = "store_unavailable"
    STORE_CLOSED = "store_closed"

    # Schema errors
    SCHEMA_SETUP_FAILED = "schema_setup_failed"
    DATABASE_PROVISION_FAILED = "database_provision_failed"

    # Query errors
    POLICY_LOAD_FAILED = "policy_load_failed"
    POLICY_SAVE_FAILED = "policy_save_failed"
    POLICY_ADD_FAILED = "policy_add_failed"
    POLICY_REMOVE_FAILED = "policy_remove_failed"
    POLICY_ALREADY_EXISTS = "policy_already_exists"
