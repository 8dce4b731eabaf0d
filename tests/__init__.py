"""Test suite for casbin_pg_adapter.

- unit/: Adapter, store, codec and configuration with mocked dependencies
- integration/: Adapter against a real PostgreSQL (CASBIN_ADAPTER_TEST_DSN)
"""
