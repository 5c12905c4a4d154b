"""Diagnostic system: codes, types, rendering."""

from appendguard.diagnostics import codes
from appendguard.diagnostics.codes import DiagnosticCode
from appendguard.diagnostics.types import Diagnostic, DiagnosticResult, Level

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticResult",
    "Level",
    "codes",
]
