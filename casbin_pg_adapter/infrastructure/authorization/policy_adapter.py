"""PostgreSQL implementation of pycasbin's async storage adapter.

The casbin enforcer owns the in-memory model and calls this adapter to
persist it:
- load_policy / load_filtered_policy: rows -> rule lines -> model
- save_policy: model -> full table replace (single transaction)
- add_policy(ies) / remove_policy(ies) / remove_filtered_policy: incremental
  auto-save of single rule changes

Following hexagonal architecture:
- The adapter orchestrates; SQL text comes from query_builder, row mapping
  from codec, and statement execution from PolicyStore
- Store failures arrive as Result values and are raised here as
  PolicyAdapterError subclasses, because casbin expects exceptions

Usage:
    settings = AdapterSettings.build(data_source_name="postgresql+asyncpg://...")
    async with await PostgresPolicyAdapter.create(settings) as adapter:
        enforcer = casbin.AsyncEnforcer("model.conf", adapter)
        await enforcer.load_policy()
"""

from collections.abc import Iterable, Sequence
from typing import Any, NoReturn, TypeVar

from casbin import persist
from casbin.persist.adapters.asyncio import AsyncAdapter
from sqlalchemy import text
from sqlalchemy.engine import RowMapping
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from casbin_pg_adapter.core.config import AdapterSettings, validate_identifier
from casbin_pg_adapter.core.constants import DEFAULT_TABLE_NAME, RULE_COLUMNS
from casbin_pg_adapter.core.container import get_logger
from casbin_pg_adapter.core.enums import ErrorCode
from casbin_pg_adapter.core.errors import (
    ConfigurationError,
    DuplicatePolicyError,
    InvalidFilterError,
    PolicyAdapterError,
    PolicyQueryError,
    SchemaError,
    StoreUnavailableError,
)
from casbin_pg_adapter.core.result import Failure, Result, Success
from casbin_pg_adapter.domain.policy_filter import Filter
from casbin_pg_adapter.domain.policy_rule import PolicyRule
from casbin_pg_adapter.domain.protocols.logger_protocol import LoggerProtocol
from casbin_pg_adapter.infrastructure.enums import InfrastructureErrorCode
from casbin_pg_adapter.infrastructure.errors import DatabaseError
from casbin_pg_adapter.infrastructure.logging.console_adapter import ConsoleAdapter
from casbin_pg_adapter.infrastructure.persistence.codec import (
    decode_rule,
    encode_rule,
    rule_line,
)
from casbin_pg_adapter.infrastructure.persistence.query_builder import (
    build_filter_clause,
    build_insert_clause,
    build_match_clause,
    project_field_window,
)
from casbin_pg_adapter.infrastructure.persistence.rule_table import build_rule_table
from casbin_pg_adapter.infrastructure.persistence.store import PolicyStore

T = TypeVar("T")

# Policy sections persisted by save_policy
SAVED_SECTIONS = ("p", "g")

_SCHEMA_CODES = {ErrorCode.SCHEMA_SETUP_FAILED, ErrorCode.DATABASE_PROVISION_FAILED}


def _exception_for(error: DatabaseError) -> PolicyAdapterError:
    """Choose the exception class that represents a store failure."""
    match error.infrastructure_code:
        case InfrastructureErrorCode.DATABASE_CLOSED:
            return StoreUnavailableError(
                error.message, code=ErrorCode.STORE_CLOSED, details=error.details
            )
        case InfrastructureErrorCode.DATABASE_CONNECTION_FAILED:
            return StoreUnavailableError(error.message, details=error.details)
        case InfrastructureErrorCode.DATABASE_CONSTRAINT_VIOLATION:
            return DuplicatePolicyError(error.message, details=error.details)
    if error.code is ErrorCode.STORE_UNAVAILABLE:
        return StoreUnavailableError(error.message, details=error.details)
    if error.code in _SCHEMA_CODES:
        return SchemaError(error.message, code=error.code, details=error.details)
    return PolicyQueryError(error.message, code=error.code, details=error.details)


class PostgresPolicyAdapter(AsyncAdapter):
    """Casbin policy adapter storing rules in a PostgreSQL table.

    Architecture:
        - PolicyStore: engine ownership and statement execution
        - rule_table: table definition for the configured name
        - codec/query_builder: rule <-> row mapping and SQL fragments

    Note:
        Construct with `create()` or `from_engine()`; both open the adapter
        (connectivity check + table creation) before returning it.

    Attributes:
        table_name: Fully qualified rule table name.
    """

    def __init__(
        self,
        store: PolicyStore,
        *,
        table_name: str = DEFAULT_TABLE_NAME,
        logger: LoggerProtocol | None = None,
    ) -> None:
        """Initialize adapter with its store.

        Args:
            store: Store the rules live in.
            table_name: Fully qualified (prefixed) rule table name.
            logger: Structured logger (application logger by default).
        """
        self.table_name = table_name
        self._store = store
        self._table = build_rule_table(table_name)
        self._table_sql = store.quote(table_name)
        self._logger = (logger or get_logger()).bind(table=table_name)
        self._filtered = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    async def create(
        cls,
        settings: AdapterSettings,
        *,
        logger: LoggerProtocol | None = None,
    ) -> "PostgresPolicyAdapter":
        """Connect with settings, provisioning the database if asked to.

        Args:
            settings: Validated adapter settings.
            logger: Structured logger (console logger built from settings
                by default).

        Returns:
            PostgresPolicyAdapter: Opened adapter owning its engine.

        Raises:
            StoreUnavailableError: If the server cannot be reached.
            SchemaError: If the database or table cannot be created.
        """
        logger = logger or ConsoleAdapter(
            use_json=settings.log_json, level=settings.log_level
        )
        if not settings.database_exists:
            await cls._provision_database(settings, logger)

        store = PolicyStore.from_url(
            settings.database_url,
            echo=settings.echo,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
        )
        adapter = cls(store, table_name=settings.qualified_table_name, logger=logger)
        try:
            await adapter.open()
        except PolicyAdapterError:
            await store.close()
            raise
        return adapter

    @classmethod
    async def from_engine(
        cls,
        engine: AsyncEngine,
        *,
        table_prefix: str = "",
        table_name: str = DEFAULT_TABLE_NAME,
        logger: LoggerProtocol | None = None,
    ) -> "PostgresPolicyAdapter":
        """Wrap an engine the caller already manages.

        The database is not provisioned, but the table is still created if
        missing. close() leaves the engine open for its owner.

        Args:
            engine: Existing async engine.
            table_prefix: Optional prefix; the table becomes prefix_table.
            table_name: Rule table name ("casbin_rule" when empty).
            logger: Structured logger.

        Returns:
            PostgresPolicyAdapter: Opened adapter.

        Raises:
            ConfigurationError: If the prefix or table name is not a safe
                identifier.
        """
        table_name = table_name or DEFAULT_TABLE_NAME
        qualified = f"{table_prefix}_{table_name}" if table_prefix else table_name
        try:
            validate_identifier(qualified, field="table_name")
        except ValueError as e:
            raise ConfigurationError(
                str(e), details={"table_prefix": table_prefix, "table_name": table_name}
            ) from e

        adapter = cls(
            PolicyStore(engine, owns_engine=False),
            table_name=qualified,
            logger=logger,
        )
        await adapter.open()
        return adapter

    @staticmethod
    async def _provision_database(
        settings: AdapterSettings, logger: LoggerProtocol
    ) -> None:
        server = PolicyStore.from_url(settings.connection_url, echo=settings.echo, pool_size=1)
        try:
            result = await server.ensure_database(settings.database_name)
        finally:
            await server.close()

        match result:
            case Success(value=created):
                logger.info(
                    "policy_database_ready",
                    database=settings.database_name,
                    created=created,
                )
            case Failure(error=error):
                exc = _exception_for(error)
                logger.error(
                    "policy_database_provision_failed",
                    error=exc,
                    database=settings.database_name,
                )
                raise exc

    async def open(self) -> None:
        """Check connectivity and make sure the rule table exists.

        Raises:
            StoreUnavailableError: If the store does not answer.
            SchemaError: If the table cannot be created.
        """
        self._unwrap(await self._store.check_connection(), "policy_store_unreachable")
        self._unwrap(
            await self._store.create_table(self._table), "policy_table_create_failed"
        )
        self._logger.info("policy_store_opened")

    async def close(self) -> None:
        """Release the store. Repeated calls are no-ops."""
        if self._store.closed:
            return
        await self._store.close()
        self._logger.info("policy_store_closed")

    async def __aenter__(self) -> "PostgresPolicyAdapter":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_policy(self, model: Any) -> None:
        """Load every stored rule into the model.

        A failure part way through leaves the model partially populated;
        callers should reload.

        Args:
            model: casbin Model receiving the rules.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
            PolicyQueryError: If the query fails.
        """
        rows = self._unwrap(
            await self._store.fetch_all(
                f"SELECT {self._column_list} FROM {self._table_sql} ORDER BY id",
                {},
                operation="load_policy",
                code=ErrorCode.POLICY_LOAD_FAILED,
            ),
            "policy_load_failed",
        )
        loaded = self._load_rows(rows, model)
        self._filtered = False
        self._logger.info("policy_loaded", rules=loaded)

    async def load_filtered_policy(self, model: Any, filter: Any) -> None:
        """Load only the rules matching every constrained filter column.

        The adapter counts as filtered from this call on, whatever rows
        matched, until the next full load_policy().

        Args:
            model: casbin Model receiving the rules.
            filter: Filter with per-column candidate values.

        Raises:
            InvalidFilterError: If filter is not a Filter.
            PolicyQueryError: If the query fails.
        """
        if not isinstance(filter, Filter):
            exc = InvalidFilterError(
                "invalid filter type",
                details={"filter_type": type(filter).__name__},
            )
            self._logger.error("policy_filter_rejected", error=exc)
            raise exc

        self._filtered = True
        clause = build_filter_clause(filter)
        where = f" WHERE {clause.sql}" if clause else ""
        rows = self._unwrap(
            await self._store.fetch_all(
                f"SELECT {self._column_list} FROM {self._table_sql}{where} ORDER BY id",
                clause.params,
                operation="load_filtered_policy",
                code=ErrorCode.POLICY_LOAD_FAILED,
            ),
            "policy_load_failed",
            filtered=True,
        )
        loaded = self._load_rows(rows, model)
        self._logger.info(
            "filtered_policy_loaded",
            rules=loaded,
            columns=[column for column, _ in filter.constraints()],
        )

    def is_filtered(self) -> bool:
        """Return whether the most recent load was filtered."""
        return self._filtered

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    async def save_policy(self, model: Any) -> bool:
        """Replace the stored rules with every "p" and "g" rule in the model.

        Destructive: the table is dropped, recreated, and refilled. All
        three steps run in one transaction, so a failure leaves the previous
        rules in place.

        Args:
            model: casbin Model holding the complete policy.

        Returns:
            bool: True once the new rule set is committed.

        Raises:
            RuleArityError: If a rule has more than six fields (nothing is
                written).
            DuplicatePolicyError: If the model holds the same rule twice.
            PolicyQueryError: If any statement fails.
        """
        inserts = [
            build_insert_clause(encode_rule(ptype, rule))
            for ptype, rule in self._model_rules(model)
        ]

        async def _replace(conn: AsyncConnection) -> int:
            await conn.run_sync(self._table.drop, checkfirst=True)
            await conn.run_sync(self._table.create)
            for clause in inserts:
                await conn.execute(
                    text(f"INSERT INTO {self._table_sql} {clause.sql}"), clause.params
                )
            return len(inserts)

        saved = self._unwrap(
            await self._store.run(
                _replace, operation="save_policy", code=ErrorCode.POLICY_SAVE_FAILED
            ),
            "policy_save_failed",
        )
        self._logger.info("policy_saved", rules=saved)
        return True

    # ------------------------------------------------------------------
    # Incremental changes
    # ------------------------------------------------------------------

    async def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Insert one rule.

        Args:
            sec: Model section ("p" or "g"); implied by ptype.
            ptype: Rule type tag.
            rule: Rule field values.

        Returns:
            bool: True once inserted.

        Raises:
            DuplicatePolicyError: If the rule is already stored.
        """
        await self._insert(ptype, rule)
        self._logger.info("policy_rule_added", ptype=ptype, rule=list(rule))
        return True

    async def add_policies(
        self, sec: str, ptype: str, rules: Iterable[Sequence[str]]
    ) -> bool:
        """Insert several rules, one statement each.

        Rules are not inserted atomically: a failure stops the batch and
        rules inserted before it stay.

        Args:
            sec: Model section; implied by ptype.
            ptype: Rule type tag shared by all rules.
            rules: Rule field values.

        Returns:
            bool: True once every rule is inserted.

        Raises:
            DuplicatePolicyError: At the first rule that is already stored.
        """
        rules = [list(rule) for rule in rules]
        for rule in rules:
            encode_rule(ptype, rule)
        for rule in rules:
            await self._insert(ptype, rule)
        self._logger.info("policy_rules_added", ptype=ptype, count=len(rules))
        return True

    async def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Delete rows whose leading fields equal the rule.

        Columns past the given fields are not compared.

        Args:
            sec: Model section; implied by ptype.
            ptype: Rule type tag.
            rule: Rule field values.

        Returns:
            bool: True if at least one row was deleted.
        """
        removed = await self._delete(ptype, list(rule))
        self._logger.info(
            "policy_rule_removed", ptype=ptype, rule=list(rule), removed=removed
        )
        return removed > 0

    async def remove_policies(
        self, sec: str, ptype: str, rules: Iterable[Sequence[str]]
    ) -> bool:
        """Delete several rules, one statement each.

        Args:
            sec: Model section; implied by ptype.
            ptype: Rule type tag shared by all rules.
            rules: Rule field values.

        Returns:
            bool: True if at least one row was deleted.
        """
        removed = 0
        rules = [list(rule) for rule in rules]
        for rule in rules:
            removed += await self._delete(ptype, rule)
        self._logger.info(
            "policy_rules_removed", ptype=ptype, count=len(rules), removed=removed
        )
        return removed > 0

    async def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, *field_values: str
    ) -> bool:
        """Delete rows matching values placed from field_index onwards.

        Fields before field_index, and fields given as "", are not compared.

        Args:
            sec: Model section; implied by ptype.
            ptype: Rule type tag.
            field_index: Field index of the first value.
            *field_values: Values for consecutive fields.

        Returns:
            bool: True if at least one row was deleted.

        Raises:
            RuleArityError: If the values do not fit within v0..v5.
        """
        window = project_field_window(field_index, field_values)
        removed = await self._delete(ptype, window)
        self._logger.info(
            "policy_rules_filter_removed",
            ptype=ptype,
            field_index=field_index,
            field_values=list(field_values),
            removed=removed,
        )
        return removed > 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def _column_list(self) -> str:
        return ", ".join(("id", *RULE_COLUMNS))

    def _load_rows(self, rows: Iterable[RowMapping], model: Any) -> int:
        loaded = 0
        for row in rows:
            rule = PolicyRule.from_row(row)
            tokens = decode_rule(rule)
            if len(tokens) < 2:
                self._logger.warning("policy_row_skipped", id=rule.id, ptype=rule.ptype)
                continue
            persist.load_policy_line(rule_line(tokens), model)
            loaded += 1
        return loaded

    @staticmethod
    def _model_rules(model: Any) -> list[tuple[str, list[str]]]:
        rules = []
        for sec in SAVED_SECTIONS:
            for ptype, assertion in model.model.get(sec, {}).items():
                rules.extend((ptype, list(rule)) for rule in assertion.policy)
        return rules

    async def _insert(self, ptype: str, rule: Sequence[str]) -> None:
        clause = build_insert_clause(encode_rule(ptype, rule))
        self._unwrap(
            await self._store.execute(
                f"INSERT INTO {self._table_sql} {clause.sql}",
                clause.params,
                operation="add_policy",
                code=ErrorCode.POLICY_ADD_FAILED,
            ),
            "policy_rule_add_failed",
            ptype=ptype,
            rule=list(rule),
        )

    async def _delete(self, ptype: str, fields: Sequence[str] | dict[int, str]) -> int:
        clause = build_match_clause(ptype, fields)
        return self._unwrap(
            await self._store.execute(
                f"DELETE FROM {self._table_sql} WHERE {clause.sql}",
                clause.params,
                operation="remove_policy",
                code=ErrorCode.POLICY_REMOVE_FAILED,
            ),
            "policy_rule_remove_failed",
            ptype=ptype,
        )

    def _unwrap(
        self, result: Result[T, DatabaseError], event: str, **context: Any
    ) -> T:
        match result:
            case Success(value=value):
                return value
            case Failure(error=error):
                self._raise(error, event, **context)

    def _raise(self, error: DatabaseError, event: str, **context: Any) -> NoReturn:
        exc = _exception_for(error)
        self._logger.error(event, error=exc, **context)
        raise exc


async def new_adapter(
    driver_name: str,
    data_source_name: str,
    *params: Any,
    logger: LoggerProtocol | None = None,
) -> PostgresPolicyAdapter:
    """Create an adapter from legacy positional parameters.

    Parameters are resolved by runtime type, see
    AdapterSettings.from_positional() for the accepted shapes.

    Args:
        driver_name: Driver identifier ("postgres" or a SQLAlchemy driver).
        data_source_name: Connection URL.
        *params: database_name / table_name / database_exists.
        logger: Structured logger.

    Returns:
        PostgresPolicyAdapter: Opened adapter.

    Raises:
        ConfigurationError: If the parameters have an unsupported shape.
    """
    settings = AdapterSettings.from_positional(driver_name, data_source_name, *params)
    return await PostgresPolicyAdapter.create(settings, logger=logger)
