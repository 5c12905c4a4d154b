"""Database adapter protocol — the boundary between the guarded session and drivers."""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


class DatabaseType(enum.Enum):
    POSTGRES = "postgres"
    DUCKDB = "duckdb"


@dataclass
class ConnectionConfig:
    name: str
    db_type: DatabaseType
    params: dict[str, str] = field(default_factory=dict)


@dataclass
class ExecutionResult:
    """Query execution result."""

    columns: list[str]
    rows: list[dict[str, object]]
    row_count: int
    duration_ms: float | None = None


class AdapterError(Exception):
    """Raised by adapters for connection/execution failures."""


@dataclass
class TableInfo:
    schema: str | None
    name: str


@dataclass
class SchemaMetadata:
    tables: list[TableInfo] = field(default_factory=list)

    def relations(self) -> set[tuple[str, str]]:
        """(schema, table) pairs, the shape the target resolver consumes."""
        return {(t.schema, t.name) for t in self.tables if t.schema is not None}


Params = Sequence[Any] | Mapping[str, Any] | None


@runtime_checkable
class DatabaseAdapter(Protocol):
    async def connect(self, config: ConnectionConfig) -> None: ...
    async def close(self) -> None: ...
    async def execute(
        self,
        sql: str,
        *,
        params: Params = None,
        labels: dict[str, str] | None = None,
    ) -> ExecutionResult: ...
    async def introspect(self) -> SchemaMetadata:
        """Every user relation in the database, as the catalog spells it."""
        ...
    async def search_path(self) -> list[str]:
        """Schemas searched, in order, for unqualified relation names."""
        ...
    def db_type(self) -> DatabaseType: ...
    def dialect(self) -> str: ...
