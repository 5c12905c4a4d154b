"""DuckDB adapter — local/in-memory, great for testing and local analytics."""

from __future__ import annotations

import time

import duckdb as _duckdb

from appendguard.adapters._base import (
    AdapterError,
    ConnectionConfig,
    DatabaseType,
    ExecutionResult,
    Params,
    SchemaMetadata,
    TableInfo,
)

_TABLES_SQL = (
    "SELECT table_schema, table_name "
    "FROM information_schema.tables "
    "WHERE table_schema NOT IN ('pg_catalog', 'information_schema') "
    "ORDER BY table_schema, table_name"
)


class DuckDBAdapter:
    """DuckDB adapter — in-process, no server needed."""

    def __init__(self) -> None:
        self._conn: _duckdb.DuckDBPyConnection | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        path = config.params.get("path", ":memory:")
        try:
            self._conn = _duckdb.connect(path, config={"custom_user_agent": "appendguard/0.1.0"})
        except Exception as e:
            raise AdapterError(f"DuckDB connection failed: {e}") from e

    async def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _ensure_conn(self) -> _duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise AdapterError("Not connected. Call connect() first.")
        return self._conn

    async def execute(
        self,
        sql: str,
        *,
        params: Params = None,
        labels: dict[str, str] | None = None,
    ) -> ExecutionResult:
        conn = self._ensure_conn()

        # DuckDB has no native label support; prepend SQL comment.
        if labels:
            label_str = ", ".join(f"{k}={v}" for k, v in labels.items())
            sql = f"/* appendguard: {label_str} */ {sql}"

        t0 = time.monotonic()
        try:
            result = conn.execute(sql, params) if params is not None else conn.execute(sql)
            columns = [desc[0] for desc in result.description] if result.description else []
            rows_raw = result.fetchall() if result.description else []
        except Exception as e:
            raise AdapterError(f"DuckDB execution failed: {e}") from e
        duration_ms = (time.monotonic() - t0) * 1000

        rows = [dict(zip(columns, row, strict=True)) for row in rows_raw]

        return ExecutionResult(
            columns=columns,
            rows=rows,
            row_count=len(rows),
            duration_ms=duration_ms,
        )

    async def introspect(self) -> SchemaMetadata:
        conn = self._ensure_conn()
        try:
            table_rows = conn.execute(_TABLES_SQL).fetchall()
        except Exception as e:
            raise AdapterError(f"DuckDB introspection failed: {e}") from e
        return SchemaMetadata(
            tables=[TableInfo(schema=schema, name=name) for schema, name in table_rows]
        )

    async def search_path(self) -> list[str]:
        conn = self._ensure_conn()
        try:
            row = conn.execute("SELECT current_schema()").fetchone()
        except Exception as e:
            raise AdapterError(f"DuckDB search_path lookup failed: {e}") from e
        return [row[0]] if row and row[0] else []

    def db_type(self) -> DatabaseType:
        return DatabaseType.DUCKDB

    def dialect(self) -> str:
        return "duckdb"
