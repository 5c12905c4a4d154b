"""The `exec` command: execute SQL behind the append-only filter.

Statements are planned through an interceptor chain carrying the filter;
an UPDATE/DELETE/MERGE on a protected relation is canceled before anything
in the SQL text reaches the database.
"""

from __future__ import annotations

import asyncio
import json

import click

from appendguard.adapters._base import AdapterError, ConnectionConfig, ExecutionResult
from appendguard.adapters._registry import open_adapter
from appendguard.cli._shared import AUTO_LABELS, parse_db, resolve_relations
from appendguard.errors import AppendOnlyViolation
from appendguard.interceptor import InterceptorChain, load_filter, unload_filter
from appendguard.session import GuardedSession
from appendguard.settings import PolicyStore


async def _run_exec(
    sql: str,
    config: ConnectionConfig,
    *,
    store: PolicyStore,
    dialect: str | None,
) -> ExecutionResult:
    """Connect, install the filter, execute. Raises AppendOnlyViolation on rejection."""
    adapter = await open_adapter(config)

    chain = InterceptorChain()
    session = GuardedSession(adapter, chain, dialect=dialect)
    interceptor = load_filter(chain, store, resolver=session.resolver)
    try:
        return await session.execute(sql, labels=AUTO_LABELS)
    finally:
        unload_filter(chain, interceptor)
        await adapter.close()


def _emit_result(result: ExecutionResult, output_format: str) -> None:
    if output_format == "json":
        envelope = {
            "decision": "allow",
            "columns": result.columns,
            "rows": result.rows,
            "row_count": result.row_count,
            "duration_ms": result.duration_ms,
        }
        click.echo(json.dumps(envelope, indent=2, default=str))
        return

    lines: list[str] = []
    if result.columns:
        lines.append(" | ".join(result.columns))
        lines.append("-+-".join("-" * max(len(c), 5) for c in result.columns))
        for row in result.rows:
            lines.append(" | ".join(str(row.get(c, "")) for c in result.columns))
    duration = f", {result.duration_ms:.0f}ms" if result.duration_ms is not None else ""
    lines.append(f"\n({result.row_count} rows{duration})")
    click.echo("\n".join(lines))


def _emit_error(output_format: str, message: str, **extra: object) -> None:
    if output_format == "json":
        envelope = {"decision": "deny", "blocked": True, "error": message, **extra}
        click.echo(json.dumps(envelope, indent=2))
    else:
        click.echo(f"error: {message}", err=True)


@click.command("exec")
@click.argument("sql")
@click.option(
    "--db",
    required=True,
    envvar="APPENDGUARD_DB",
    help="Database as type:key=val,... (e.g. duckdb:path=ledger.duckdb).",
)
@click.option(
    "--relations",
    default=None,
    envvar="APPENDGUARD_RELATIONS",
    help="Protected relations (schema.table, comma-separated). Defaults to the settings file.",
)
@click.option("--dialect", default=None, help="SQL dialect (defaults to the adapter's).")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="json",
    help="Output format.",
)
def exec_cmd(
    sql: str,
    db: str,
    relations: str | None,
    dialect: str | None,
    output_format: str,
) -> None:
    """Execute SQL with UPDATE/DELETE blocked on append-only relations."""
    try:
        config = parse_db(db)
    except click.BadParameter as e:
        click.echo(f"error: {e.format_message()}", err=True)
        raise SystemExit(1) from e

    store = PolicyStore(relations=resolve_relations(relations))

    try:
        result = asyncio.run(_run_exec(sql, config, store=store, dialect=dialect))
    except AppendOnlyViolation as e:
        _emit_error(output_format, str(e), relation=e.relation, sqlstate=e.sqlstate)
        raise SystemExit(1) from e
    except AdapterError as e:
        _emit_error(output_format, str(e))
        raise SystemExit(1) from e

    _emit_result(result, output_format)
