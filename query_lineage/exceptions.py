"""
Custom exception classes for query lineage analysis.

This module defines all custom exceptions used throughout the query_lineage
package. Construction-time exceptions are only raised when the matching
ErrorMode is FAIL; the default behaviour is to record a diagnostic and keep
going. CycleDetectedError is the one condition that always surfaces, and only
from an evaluation-order request.
"""

from typing import Iterable, Optional


class LineageError(Exception):
    """Base exception class for all lineage analysis errors.

    Attributes:
        message: Human-readable error message describing the error.
    """

    def __init__(self, message: str) -> None:
        """Initialize a LineageError with a message.

        Args:
            message: Error message describing what went wrong.
        """
        self.message = message
        super().__init__(self.message)


class SQLParseError(LineageError):
    """Exception raised when SQL text cannot be turned into an AST."""


class UnsupportedQueryShapeError(LineageError):
    """Exception raised when a query body or table factor is not handled.

    Set operations (UNION, INTERSECT, EXCEPT), non-query statements and table
    factors such as UNNEST or table functions produce no lineage.

    Attributes:
        message: Error message describing the unsupported construct.
        shape: Name of the AST node type that was not handled.
        context: Optional SQL snippet for context.
    """

    def __init__(
        self, message: str, shape: str, context: Optional[str] = None
    ) -> None:
        """Initialize an UnsupportedQueryShapeError.

        Args:
            message: Error message describing the unsupported construct.
            shape: Name of the AST node type that was not handled.
            context: Optional SQL snippet for context.
        """
        self.shape = shape
        self.context = context
        super().__init__(message)


class UnaliasedDerivedTableError(LineageError):
    """Exception raised when a subquery in FROM has no alias.

    An unaliased derived table cannot be referenced by the enclosing query, so
    no table entity is registered for it.

    Attributes:
        message: Error message.
        context: Optional SQL snippet of the subquery.
    """

    def __init__(self, message: str, context: Optional[str] = None) -> None:
        self.context = context
        super().__init__(message)


class UnresolvedReferenceError(LineageError):
    """Exception raised when a column reference cannot be attributed to a table.

    This happens for unqualified columns in a scope with several tables, or
    for qualifiers that name no table of the enclosing scope.

    Attributes:
        message: Error message describing the unresolved reference.
        reference: The unresolved reference text.
        available_tables: Table keys visible in the scope.
    """

    def __init__(
        self,
        message: str,
        reference: str,
        available_tables: Optional[list[str]] = None,
    ) -> None:
        """Initialize an UnresolvedReferenceError.

        Args:
            message: Error message describing the unresolved reference.
            reference: The unresolved reference text.
            available_tables: Optional list of table keys in scope.
        """
        self.reference = reference
        self.available_tables = available_tables or []

        if self.available_tables:
            message = self._build_message(message)

        super().__init__(message)

    def _build_message(self, message: str) -> str:
        """Append the tables that were in scope."""
        msg = [message, "Available tables:"]
        for table in self.available_tables:
            msg.append(f"  - {table}")
        return "\n".join(msg)


class CycleDetectedError(LineageError):
    """Exception raised when no evaluation order exists.

    Attributes:
        keys: Registry keys of every table involved in a cycle.
    """

    def __init__(self, keys: Iterable[str]) -> None:
        """Initialize a CycleDetectedError.

        Args:
            keys: Registry keys involved in the cycle(s).
        """
        self.keys = frozenset(keys)
        super().__init__(
            "Dependency cycle detected between: " + ", ".join(sorted(self.keys))
        )
