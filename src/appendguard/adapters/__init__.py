"""Database adapters — implementations of the DatabaseAdapter protocol."""

from appendguard.adapters._base import (
    AdapterError,
    ConnectionConfig,
    DatabaseAdapter,
    DatabaseType,
    ExecutionResult,
    SchemaMetadata,
    TableInfo,
)

__all__ = [
    "AdapterError",
    "ConnectionConfig",
    "DatabaseAdapter",
    "DatabaseType",
    "ExecutionResult",
    "SchemaMetadata",
    "TableInfo",
]
