"""Diagnostics produced by the offline append-only check.

Each statement that is rejected yields an error; conditions the filter
absorbs (unparseable text, unresolved targets, nothing configured) yield
info-level diagnostics so callers can see why a statement passed.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from appendguard.diagnostics.codes import DiagnosticCode


class Level(enum.IntEnum):
    INFO = 0
    ERROR = 1


@dataclass
class Diagnostic:
    level: Level
    code: DiagnosticCode
    message: str
    notes: list[str] = field(default_factory=list)

    # -- Builder classmethods ---------------------------------------------------

    @classmethod
    def error(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.ERROR, code=code, message=message)

    @classmethod
    def info(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.INFO, code=code, message=message)

    # -- Builder chain methods --------------------------------------------------

    def note(self, note: str) -> Diagnostic:
        self.notes.append(note)
        return self

    # -- Query methods ----------------------------------------------------------

    @property
    def is_blocking(self) -> bool:
        return self.level == Level.ERROR


@dataclass
class DiagnosticResult:
    original_sql: str
    diagnostics: list[Diagnostic]
    blocked: bool
    classification: list[str] = field(default_factory=list)
    targets: list[str] = field(default_factory=list)
