"""Internal types for the append-only filter."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class CommandKind(enum.Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    MERGE = "merge"
    UTILITY = "utility"  # DDL, TRUNCATE, GRANT, COPY, SET, BEGIN, ...
    UNKNOWN = "unknown"  # Could not be parsed → allowed

    @property
    def is_mutating(self) -> bool:
        return self in _MUTATING


_MUTATING = frozenset({CommandKind.UPDATE, CommandKind.DELETE, CommandKind.MERGE})


@dataclass(frozen=True)
class RelationName:
    schema: str
    name: str

    @property
    def qualified(self) -> str:
        return f"{self.schema}.{self.name}"

    def __str__(self) -> str:
        return self.qualified


@dataclass(frozen=True)
class Verdict:
    allowed: bool
    relation: str | None = None

    @classmethod
    def allow(cls) -> Verdict:
        return cls(allowed=True)

    @classmethod
    def reject(cls, relation: str) -> Verdict:
        return cls(allowed=False, relation=relation)

    @property
    def message(self) -> str | None:
        if self.allowed:
            return None
        return f"Relation {self.relation} is append only!"
