"""Append-only policy: classify, resolve target, match, return a verdict."""

from __future__ import annotations

from appendguard.diagnostics import Diagnostic, DiagnosticResult, codes
from appendguard.policy._types import CommandKind, RelationName, Verdict
from appendguard.policy.relations import is_protected, parse_relation_list
from appendguard.policy.statement import Statement, parse_statements
from appendguard.policy.tables import RelationResolver, SearchPathResolver, target_table

__all__ = [
    "CommandKind",
    "RelationName",
    "Statement",
    "Verdict",
    "check_sql",
    "decide",
    "parse_statements",
    "resolve_target",
]


def resolve_target(
    statement: Statement, resolver: RelationResolver | None = None
) -> RelationName | None:
    """Resolve the relation a mutating statement writes to, or None."""
    table = target_table(statement.expression)
    if table is None:
        return None
    if resolver is None:
        resolver = SearchPathResolver(dialect=statement.dialect)
    return resolver.resolve(table)


def decide(
    statement: Statement,
    relations: str | None,
    resolver: RelationResolver | None = None,
) -> Verdict:
    """Decide whether a statement may proceed.

    Steps:
        1. Nothing configured → allow
        2. SELECT / INSERT / UTILITY / unparsed → allow
        3. Target relation unresolved → allow
        4. ``schema.table`` listed in ``relations`` → reject

    Args:
        statement: The parsed statement.
        relations: Raw comma-separated setting, read by the caller just now.
        resolver: Maps table references to schema-qualified names. The
            default accepts qualified names as written and leaves
            unqualified ones unresolved.
    """
    if not relations:
        return Verdict.allow()
    if not statement.kind.is_mutating:
        return Verdict.allow()

    target = resolve_target(statement, resolver)
    if target is None:
        return Verdict.allow()

    qualified = target.qualified
    if is_protected(qualified, relations):
        return Verdict.reject(qualified)
    return Verdict.allow()


def check_sql(
    sql: str,
    *,
    relations: str | None,
    dialect: str | None = None,
    resolver: RelationResolver | None = None,
) -> DiagnosticResult:
    """Run every statement in ``sql`` through the filter without executing.

    Returns a DiagnosticResult with one error per rejected statement and
    info diagnostics for statements the filter let through unexamined.
    """
    sql = sql.strip()
    diagnostics: list[Diagnostic] = []
    classification: list[str] = []
    targets: list[str] = []

    if not relations or not parse_relation_list(relations):
        diagnostics.append(
            Diagnostic.info(codes.NO_PROTECTED_RELATIONS, "no protected relations configured")
            .note("set append_only_filter.append_only_relations or pass --relations")
        )

    for statement in parse_statements(sql, dialect=dialect):
        classification.append(statement.kind.value)

        if statement.kind == CommandKind.UNKNOWN:
            diagnostics.append(
                Diagnostic.info(codes.UNPARSED_STATEMENT, "statement could not be parsed")
                .note("unparsed statements are passed through to the database")
            )
            continue
        if not statement.kind.is_mutating:
            continue

        target = resolve_target(statement, resolver)
        if target is None:
            diagnostics.append(
                Diagnostic.info(
                    codes.TARGET_UNRESOLVED,
                    f"{statement.kind.value} target could not be resolved",
                ).note("statements with an unresolved target are allowed")
            )
            continue
        targets.append(target.qualified)

        verdict = decide(statement, relations, resolver)
        if not verdict.allowed:
            diagnostics.append(
                Diagnostic.error(codes.APPEND_ONLY_VIOLATION, verdict.message)
                .note(f"{statement.kind.value.upper()} is not allowed on append-only relations")
            )

    return DiagnosticResult(
        original_sql=sql,
        diagnostics=diagnostics,
        blocked=any(d.is_blocking for d in diagnostics),
        classification=classification,
        targets=targets,
    )
