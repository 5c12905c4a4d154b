"""PostgreSQL adapter — psycopg async, labels via SQL comments + application_name."""

from __future__ import annotations

import time

import psycopg

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


class PostgresAdapter:
    """PostgreSQL adapter using psycopg (async)."""

    def __init__(self) -> None:
        self._conn: psycopg.AsyncConnection | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        dsn = config.params.get("dsn")
        if not dsn:
            raise AdapterError("PostgreSQL requires 'dsn' in connection params")
        try:
            self._conn = await psycopg.AsyncConnection.connect(
                dsn, autocommit=True, application_name="appendguard"
            )
        except Exception as e:
            raise AdapterError(f"PostgreSQL connection failed: {e}") from e

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    def _ensure_conn(self) -> psycopg.AsyncConnection:
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

        # Label via SQL comment prefix.
        if labels:
            label_str = ", ".join(f"{k}={v}" for k, v in labels.items())
            sql = f"/* appendguard: {label_str} */ {sql}"

        t0 = time.monotonic()
        try:
            async with conn.cursor() as cur:
                await cur.execute(sql, params)
                columns = [desc.name for desc in cur.description] if cur.description else []
                rows_raw = await cur.fetchall() if cur.description else []
        except Exception as e:
            raise AdapterError(f"PostgreSQL execution failed: {e}") from e
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
            async with conn.cursor() as cur:
                await cur.execute(_TABLES_SQL)
                table_rows = await cur.fetchall()
        except Exception as e:
            raise AdapterError(f"PostgreSQL introspection failed: {e}") from e
        return SchemaMetadata(
            tables=[TableInfo(schema=schema, name=name) for schema, name in table_rows]
        )

    async def search_path(self) -> list[str]:
        conn = self._ensure_conn()
        try:
            async with conn.cursor() as cur:
                # Implicit schemas included: pg_temp_N first once it exists, then pg_catalog.
                # Schemas on search_path that do not exist are left out.
                await cur.execute("SELECT current_schemas(true)")
                row = await cur.fetchone()
        except Exception as e:
            raise AdapterError(f"PostgreSQL search_path lookup failed: {e}") from e
        return list(row[0]) if row and row[0] else []

    def db_type(self) -> DatabaseType:
        return DatabaseType.POSTGRES

    def dialect(self) -> str:
        return "postgres"
