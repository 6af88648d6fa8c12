"""
Column lineage model.

This module defines the ColumnLineage class, which records one projected
output column: the scope it belongs to, the expression that produces it and
the identifiers that expression reads.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

WILDCARD_NAME = "*"


@dataclass(frozen=True)
class ColumnLineage:
    """Lineage of a single projected column.

    Attributes:
        output_name: Alias if given, else the rendered expression, else "*"
            for wildcard projections.
        context: Registry key of the enclosing scope (CTE name, subquery
            alias or the result sentinel).
        source_expression: Rendered text of the projected expression
            (without its alias).
        dependencies: Identifiers read by the expression, in first-seen order
            and not deduplicated. Compound identifiers stay dotted
            ("c.id", "db.t.col").
        unresolved: Dependencies that could not be attributed to a table of
            the enclosing scope.
        is_wildcard: True for "*" and "t.*" projections.

    Example:
        >>> lineage = ColumnLineage(
        ...     output_name="total",
        ...     context="__result__",
        ...     source_expression="o.amount + o.tax",
        ...     dependencies=("o.amount", "o.tax"),
        ... )
        >>> lineage.is_complete
        True
    """

    output_name: str
    context: str
    source_expression: str
    dependencies: Tuple[str, ...] = ()
    unresolved: Tuple[str, ...] = ()
    is_wildcard: bool = False

    def __post_init__(self) -> None:
        """Coerce sequences to tuples so records stay hashable and immutable."""
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "unresolved", tuple(self.unresolved))
        for reference in self.unresolved:
            if reference not in self.dependencies:
                raise ValueError(
                    f"unresolved reference '{reference}' is not a dependency of "
                    f"'{self.output_name}'"
                )

    @property
    def is_complete(self) -> bool:
        """True when every dependency is attributed and nothing was elided by '*'."""
        return not self.unresolved and not self.is_wildcard

    @property
    def qualified_name(self) -> str:
        return f"{self.context}.{self.output_name}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (for serialization)."""
        return {
            "output_name": self.output_name,
            "context": self.context,
            "source_expression": self.source_expression,
            "dependencies": list(self.dependencies),
            "unresolved": list(self.unresolved),
            "is_wildcard": self.is_wildcard,
        }


@dataclass(frozen=True)
class UnresolvedReference:
    """Marker for a dependency whose source table is unknown.

    Attributes:
        context: Scope of the column that holds the reference.
        output_name: Output column holding the reference.
        reference: The identifier text.
    """

    context: str
    output_name: str
    reference: str

    def __str__(self) -> str:
        return f"{self.context}.{self.output_name} <- {self.reference}"
