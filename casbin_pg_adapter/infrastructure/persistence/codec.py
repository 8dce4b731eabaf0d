"""Row codec: rule type tag + positional fields <-> relational columns.

Encoding writes only the slots a rule actually uses, leaving unused columns
to the table default. Decoding reads the type tag followed by the unbroken
run of non-empty fields from v0: the first empty slot ends the rule, even if
a later slot holds data.

Example:
    >>> encode_rule("p", ["alice", "data1", "read"])
    {'p_type': 'p', 'v0': 'alice', 'v1': 'data1', 'v2': 'read'}
    >>> decode_rule(PolicyRule(ptype="p", fields=("a", "b", "", "d", "", "")))
    ['p', 'a', 'b']
"""

from collections.abc import Sequence

from casbin_pg_adapter.core.constants import FIELD_COLUMNS, MAX_RULE_FIELDS, PTYPE_COLUMN
from casbin_pg_adapter.core.errors import RuleArityError
from casbin_pg_adapter.domain.policy_rule import PolicyRule

RULE_LINE_SEPARATOR = ", "


def check_arity(ptype: str, fields: Sequence[str]) -> None:
    """Reject rules with more fields than there are field columns.

    Raises:
        RuleArityError: If `fields` has more than six values.
    """
    if len(fields) > MAX_RULE_FIELDS:
        raise RuleArityError(
            f"rule has {len(fields)} fields, at most {MAX_RULE_FIELDS} are supported",
            details={"ptype": ptype, "fields": list(fields)},
        )


def encode_rule(ptype: str, fields: Sequence[str | None]) -> dict[str, str]:
    """Map a rule onto named column values.

    Empty and None slots are omitted so the column keeps its default.

    Args:
        ptype: Rule type tag.
        fields: Up to six positional field values.

    Returns:
        dict[str, str]: Column name -> value, in column order.

    Raises:
        RuleArityError: If more than six fields are given.
    """
    check_arity(ptype, fields)  # type: ignore[arg-type]
    columns = {PTYPE_COLUMN: ptype}
    for column, value in zip(FIELD_COLUMNS, fields):
        if value:
            columns[column] = value
    return columns


def decode_rule(rule: PolicyRule) -> list[str]:
    """Rebuild the flat token list of a stored rule.

    Args:
        rule: Row read from the rule table.

    Returns:
        list[str]: [ptype] plus every field up to the first empty one.
    """
    tokens = [rule.ptype]
    for value in rule.fields:
        if not value:
            break
        tokens.append(value)
    return tokens


def rule_line(tokens: Sequence[str]) -> str:
    """Join decoded tokens into the engine's textual rule line."""
    return RULE_LINE_SEPARATOR.join(tokens)
