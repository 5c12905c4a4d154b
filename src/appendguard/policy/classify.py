"""Classify SQL statements by command kind (SELECT, INSERT, UPDATE, ...)."""

from __future__ import annotations

from sqlglot import exp

from appendguard.policy._types import CommandKind

_SELECT_TYPES = (exp.Select, exp.Union, exp.Intersect, exp.Except, exp.Subquery, exp.Values)

_KINDS: tuple[tuple[type[exp.Expression], CommandKind], ...] = (
    (exp.Insert, CommandKind.INSERT),
    (exp.Update, CommandKind.UPDATE),
    (exp.Delete, CommandKind.DELETE),
    (exp.Merge, CommandKind.MERGE),
)


def classify(statement: exp.Expression | None) -> CommandKind:
    """Classify a parsed statement by its top-level command.

    Only the outermost node counts, the way a planner sees the query:
    - SELECT ... FOR UPDATE is a SELECT
    - INSERT ... ON CONFLICT DO UPDATE is an INSERT
    - WITH d AS (DELETE ...) SELECT ... is a SELECT
    Everything that is not a query (DDL, TRUNCATE, GRANT, COPY, SET,
    transaction control, generic commands) is UTILITY. A missing AST means
    the text could not be parsed: UNKNOWN.
    """
    if statement is None:
        return CommandKind.UNKNOWN
    if isinstance(statement, _SELECT_TYPES):
        return CommandKind.SELECT
    for node_type, kind in _KINDS:
        if isinstance(statement, node_type):
            return kind
    return CommandKind.UTILITY
