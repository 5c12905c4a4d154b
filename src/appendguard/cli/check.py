"""The `check` command: run SQL through the append-only filter without executing."""

from __future__ import annotations

import json

import click

from appendguard.cli._shared import resolve_relations
from appendguard.diagnostics.render import render_json, render_text
from appendguard.policy import check_sql
from appendguard.policy.tables import SearchPathResolver


@click.command()
@click.argument("sql")
@click.option(
    "--relations",
    default=None,
    envvar="APPENDGUARD_RELATIONS",
    help="Protected relations (schema.table, comma-separated). Defaults to the settings file.",
)
@click.option("--dialect", default=None, help="SQL dialect (postgres, duckdb, etc.)")
@click.option(
    "--search-path",
    default=None,
    help="Comma-separated schemas used to resolve unqualified table names.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format.",
)
def check(
    sql: str,
    relations: str | None,
    dialect: str | None,
    search_path: str | None,
    output_format: str,
) -> None:
    """Check SQL against the append-only policy without executing it."""
    schemas = [s.strip() for s in search_path.split(",") if s.strip()] if search_path else []
    resolver = SearchPathResolver(search_path=schemas, dialect=dialect)

    result = check_sql(
        sql,
        relations=resolve_relations(relations),
        dialect=dialect,
        resolver=resolver,
    )
    if output_format == "json":
        click.echo(json.dumps(render_json(result), indent=2))
    else:
        click.echo(render_text(result))
    if result.blocked:
        raise SystemExit(1)
