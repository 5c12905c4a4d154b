"""Test on-demand adapter loading."""

import asyncio

from appendguard.adapters._base import AdapterError, ConnectionConfig, DatabaseType
from appendguard.adapters._registry import _DRIVERS, adapter_class, open_adapter


def test_duckdb_adapter_class():
    assert adapter_class(DatabaseType.DUCKDB).__name__ == "DuckDBAdapter"


def test_postgres_adapter_class():
    """psycopg may or may not be installed."""
    try:
        cls = adapter_class(DatabaseType.POSTGRES)
        assert cls.__name__ == "PostgresAdapter"
    except AdapterError as e:
        assert "appendguard[postgres]" in str(e)


def test_every_database_type_has_a_driver():
    assert set(_DRIVERS) == set(DatabaseType)


def test_open_adapter_connects():
    config = ConnectionConfig(name="mem", db_type=DatabaseType.DUCKDB, params={})
    adapter = asyncio.run(open_adapter(config))
    try:
        assert asyncio.run(adapter.search_path()) == ["main"]
    finally:
        asyncio.run(adapter.close())
