"""
Diagnostic collection for dependency graph construction.

This module defines the Diagnostic record and DiagnosticCollector, which keep
the non-fatal irregularities found while a graph is built (unsupported query
shapes, unaliased derived tables, unresolved references, registry key
overwrites, reserved keys) so callers can tell a partial graph from a complete one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from query_lineage.exceptions import LineageError
from query_lineage.models.config import ErrorMode

logger = logging.getLogger(__name__)

LEVELS = ("INFO", "WARNING", "ERROR")


class DiagnosticCode(str, Enum):
    """Kinds of construction-time irregularities."""

    UNSUPPORTED_QUERY_SHAPE = "unsupported_query_shape"
    UNALIASED_DERIVED_TABLE = "unaliased_derived_table"
    UNRESOLVED_REFERENCE = "unresolved_reference"
    KEY_OVERWRITTEN = "key_overwritten"
    RESERVED_KEY = "reserved_key"


@dataclass(frozen=True)
class Diagnostic:
    """Warning or error message recorded during graph construction.

    Attributes:
        level: Severity level ("INFO", "WARNING", "ERROR").
        code: DiagnosticCode of the irregularity.
        message: Human-readable message.
        context: Optional context information (e.g. SQL snippet).

    Example:
        >>> diagnostic = Diagnostic(
        ...     level="WARNING",
        ...     code=DiagnosticCode.UNALIASED_DERIVED_TABLE,
        ...     message="Derived table without alias skipped",
        ... )
        >>> diagnostic.level
        'WARNING'
    """

    level: str
    code: DiagnosticCode
    message: str
    context: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic level."""
        if self.level not in LEVELS:
            raise ValueError(
                f"Invalid diagnostic level: {self.level}. "
                f"Must be one of {list(LEVELS)}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code.value,
            "message": self.message,
            "context": self.context,
        }


class DiagnosticCollector:
    """Collects diagnostics during graph construction.

    Attributes:
        diagnostics: Diagnostic records in the order they were added
            (read-only tuple; use add() or report() to record one).

    Example:
        >>> collector = DiagnosticCollector()
        >>> collector.add("WARNING", DiagnosticCode.UNRESOLVED_REFERENCE, "id")
        >>> collector.has_errors()
        False
        >>> len(collector)
        1
    """

    def __init__(self) -> None:
        """Initialize a DiagnosticCollector."""
        self._diagnostics: list[Diagnostic] = []
        self._frozen = False

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def freeze(self) -> None:
        """Reject further add() and clear() calls."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise LineageError("Diagnostics are frozen and cannot be modified")

    def add(
        self,
        level: str,
        code: DiagnosticCode,
        message: str,
        context: Optional[str] = None,
    ) -> None:
        """Add a diagnostic.

        Args:
            level: Severity level ("INFO", "WARNING", "ERROR").
            code: DiagnosticCode of the irregularity.
            message: Message text.
            context: Optional context information (e.g. SQL snippet).
        """
        self._check_mutable()
        self._diagnostics.append(
            Diagnostic(level=level, code=code, message=message, context=context)
        )

    def report(
        self,
        error: LineageError,
        code: DiagnosticCode,
        mode: ErrorMode,
        context: Optional[str] = None,
    ) -> None:
        """Handle an irregularity according to its ErrorMode.

        Args:
            error: Exception describing the irregularity.
            code: DiagnosticCode recorded in WARN mode.
            mode: FAIL raises ``error``; WARN records a WARNING diagnostic
                and logs it; IGNORE only logs at debug level.
            context: Optional SQL snippet.

        Raises:
            LineageError: ``error`` itself, when mode is ErrorMode.FAIL.
        """
        if mode is ErrorMode.FAIL:
            raise error

        if mode is ErrorMode.WARN:
            logger.warning("%s: %s", code.value, error.message)
            self.add("WARNING", code, error.message, context)
        else:
            logger.debug("Ignored %s: %s", code.value, error.message)

    def has_errors(self) -> bool:
        """Check if any error-level diagnostics exist."""
        return any(d.level == "ERROR" for d in self.diagnostics)

    def get_all(self) -> list[Diagnostic]:
        """Get all collected diagnostics, in insertion order."""
        return list(self._diagnostics)

    def get_by_level(self, level: str) -> list[Diagnostic]:
        """Get diagnostics with the given severity level."""
        return [d for d in self.diagnostics if d.level == level]

    def get_by_code(self, code: DiagnosticCode) -> list[Diagnostic]:
        """Get diagnostics of the given kind."""
        return [d for d in self.diagnostics if d.code == code]

    def clear(self) -> None:
        """Remove all collected diagnostics."""
        self._check_mutable()
        self._diagnostics.clear()

    def get_summary(self) -> dict[str, int]:
        """Get a summary of diagnostics by level.

        Example:
            >>> collector = DiagnosticCollector()
            >>> collector.add("INFO", DiagnosticCode.KEY_OVERWRITTEN, "t")
            >>> collector.get_summary() == {"INFO": 1, "WARNING": 0, "ERROR": 0}
            True
        """
        summary: dict[str, int] = {level: 0 for level in LEVELS}
        for diagnostic in self.diagnostics:
            summary[diagnostic.level] += 1
        return summary
