"""
Utility functions and helpers for query lineage.

This package contains sqlglot AST accessors, diagnostic collection and
report rendering.
"""

from query_lineage.utils.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticCollector,
)

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticCollector",
]
