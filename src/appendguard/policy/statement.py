"""Incoming statements: SQL text parsed into one Statement per command."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import sqlglot
from sqlglot import exp

from appendguard.policy._types import CommandKind
from appendguard.policy.classify import classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    sql: str
    expression: exp.Expression | None
    kind: CommandKind
    dialect: str | None = None

    @classmethod
    def from_expression(
        cls, expression: exp.Expression, *, sql: str | None = None, dialect: str | None = None
    ) -> Statement:
        return cls(
            sql=sql if sql is not None else expression.sql(dialect=dialect),
            expression=expression,
            kind=classify(expression),
            dialect=dialect,
        )

    @classmethod
    def unparsed(cls, sql: str, *, dialect: str | None = None) -> Statement:
        return cls(sql=sql, expression=None, kind=CommandKind.UNKNOWN, dialect=dialect)


def parse_statements(sql: str, *, dialect: str | None = None) -> list[Statement]:
    """Parse SQL text into statements, one per command.

    Empty statements (stray semicolons) are skipped. Text sqlglot cannot
    parse becomes a single UNKNOWN statement rather than an error: the
    database still gets to reject malformed SQL itself.
    """
    sql = sql.strip()
    if not sql:
        return []

    try:
        expressions = [e for e in sqlglot.parse(sql, dialect=dialect) if e is not None]
    except sqlglot.errors.SqlglotError as e:
        logger.warning("could not parse statement, passing it through: %s", e)
        return [Statement.unparsed(sql, dialect=dialect)]

    if len(expressions) == 1:
        return [Statement.from_expression(expressions[0], sql=sql, dialect=dialect)]
    return [Statement.from_expression(e, dialect=dialect) for e in expressions]
