"""Stable, searchable diagnostic code registry.

Ranges:
- Q0001      — General (parsing)
- Q03xx      — Append-only access control
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DiagnosticCode:
    value: int

    def __str__(self) -> str:
        return f"Q{self.value:04d}"


# General
UNPARSED_STATEMENT = DiagnosticCode(1)

# Append-only access control (Q03xx)
APPEND_ONLY_VIOLATION = DiagnosticCode(301)
TARGET_UNRESOLVED = DiagnosticCode(302)
NO_PROTECTED_RELATIONS = DiagnosticCode(303)
