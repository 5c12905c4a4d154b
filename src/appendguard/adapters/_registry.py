"""Open a connected adapter for a ConnectionConfig, importing its driver on demand."""

from __future__ import annotations

import importlib
import logging

from appendguard.adapters._base import (
    AdapterError,
    ConnectionConfig,
    DatabaseAdapter,
    DatabaseType,
)

logger = logging.getLogger(__name__)

# db type -> (module, class, pip extra carrying the driver)
_DRIVERS: dict[DatabaseType, tuple[str, str, str]] = {
    DatabaseType.POSTGRES: ("appendguard.adapters.postgres", "PostgresAdapter", "postgres"),
    DatabaseType.DUCKDB: ("appendguard.adapters.duckdb", "DuckDBAdapter", "duckdb"),
}


def adapter_class(db_type: DatabaseType) -> type[DatabaseAdapter]:
    """Import the adapter for ``db_type``; AdapterError names the extra to install."""
    module_path, class_name, extra = _DRIVERS[db_type]
    try:
        mod = importlib.import_module(module_path)
    except ImportError as e:
        raise AdapterError(
            f"Guarding {db_type.value} needs its driver. "
            f"Install with: pip install 'appendguard[{extra}]'"
        ) from e
    return getattr(mod, class_name)


async def open_adapter(config: ConnectionConfig) -> DatabaseAdapter:
    adapter = adapter_class(config.db_type)()
    await adapter.connect(config)
    logger.debug("connected to %s database %r", config.db_type.value, config.name)
    return adapter
