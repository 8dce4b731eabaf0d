"""Pytest configuration and shared fixtures.

This configuration provides:
1. Marker registration (unit, integration)
2. Automatic asyncio marking of coroutine tests
3. A real casbin RBAC model for ingestion checks
4. Mocked store and logger for adapter unit tests
"""

import inspect
from unittest.mock import AsyncMock, MagicMock

import pytest
from casbin.model import Model

from casbin_pg_adapter.core.result import Success
from casbin_pg_adapter.infrastructure.persistence.store import PolicyStore

RBAC_MODEL_TEXT = """
[request_definition]
r = sub, obj, act

[policy_definition]
p = sub, obj, act

[role_definition]
g = _, _

[policy_effect]
e = some(where (p.eft == allow))

[matchers]
m = g(r.sub, p.sub) && r.obj == p.obj && r.act == p.act
"""


def build_model() -> Model:
    """Build a fresh RBAC model with no rules loaded."""
    model = Model()
    model.load_model_from_text(RBAC_MODEL_TEXT)
    return model


@pytest.fixture
def casbin_model() -> Model:
    """Fresh casbin RBAC model (p = sub, obj, act; g = _, _)."""
    return build_model()


@pytest.fixture
def mock_logger():
    """Logger double whose bind() returns itself so calls stay inspectable."""
    logger = MagicMock()
    logger.bind.return_value = logger
    logger.with_context.return_value = logger
    return logger


@pytest.fixture
def mock_store():
    """PolicyStore double with successful defaults.

    run() executes the work function against an AsyncMock connection
    (exposed as mock_store.connection) so tests can inspect statements.
    """
    store = MagicMock(spec=PolicyStore)
    store.closed = False
    store.quote.side_effect = lambda identifier: identifier
    store.check_connection = AsyncMock(return_value=Success(value=None))
    store.create_table = AsyncMock(return_value=Success(value=None))
    store.fetch_all = AsyncMock(return_value=Success(value=[]))
    store.execute = AsyncMock(return_value=Success(value=1))
    store.close = AsyncMock()

    connection = AsyncMock()
    store.connection = connection

    async def _run(work, *, operation, code):
        return Success(value=await work(connection))

    store.run = AsyncMock(side_effect=_run)
    return store


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with real PostgreSQL database"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
