"""Exceptions surfaced by the append-only filter."""

from __future__ import annotations


class AppendGuardError(Exception):
    """Base class for appendguard errors."""


class QueryCanceled(AppendGuardError):
    """A statement was canceled before execution (SQLSTATE 57014)."""

    sqlstate = "57014"


class AppendOnlyViolation(QueryCanceled):
    """An UPDATE/DELETE/MERGE targeted a protected relation."""

    def __init__(self, relation: str) -> None:
        super().__init__(f"Relation {relation} is append only!")
        self.relation = relation


class SettingError(AppendGuardError):
    """Unknown setting, or an attempt to change a read-only one."""
