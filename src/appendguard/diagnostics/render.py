"""Render diagnostics for terminal (text) and machine (JSON) output."""

from __future__ import annotations

from appendguard.diagnostics.types import Diagnostic, DiagnosticResult


def render_json(result: DiagnosticResult) -> dict:
    """Render a DiagnosticResult as a JSON-serializable dict."""
    return {
        "sql": result.original_sql,
        "decision": "deny" if result.blocked else "allow",
        "blocked": result.blocked,
        "classification": result.classification,
        "targets": result.targets,
        "diagnostics": [_diagnostic_to_dict(diag) for diag in result.diagnostics],
    }


def render_text(result: DiagnosticResult) -> str:
    """Render a DiagnosticResult as human-readable text."""
    lines: list[str] = []
    for d in result.diagnostics:
        lines.append(f"{d.level.name.lower()}[{d.code}]: {d.message}")
        for note in d.notes:
            lines.append(f"  = note: {note}")
    lines.append(f"decision: {'deny' if result.blocked else 'allow'}")
    return "\n".join(lines)


def _diagnostic_to_dict(d: Diagnostic) -> dict:
    return {
        "level": d.level.name.lower(),
        "code": str(d.code),
        "message": d.message,
        "notes": d.notes,
    }
