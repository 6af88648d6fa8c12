"""
Table entity model.

This module defines the TableEntity class and TableKind enum, which describe
one table-like thing visible in a query: a base table, a CTE, a derived
subquery, or the synthetic sentinel that stands for the query's result.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

DERIVED_SUBQUERY_NAME = "(subquery)"
SCOPE_SEPARATOR = "::"


class TableKind(Enum):
    """Table entity kind enumeration."""

    BASE_TABLE = "base_table"  # Physical table or view read by the query
    CTE = "cte"  # WITH clause entry
    DERIVED_SUBQUERY = "derived_subquery"  # Aliased subquery in FROM/JOIN
    RESULT = "result"  # Sentinel for the query's final output


@dataclass(frozen=True)
class TableEntity:
    """One table-like entity registered in a dependency graph.

    Attributes:
        canonical_name: Fully-qualified name for base tables, the declared
            name for CTEs, "(subquery)" for derived subqueries.
        kind: TableKind of the entity.
        exposed_alias: Name the entity is referenced by in its scope, if any.
        scope: Key of the enclosing scope when the entity would otherwise
            share that scope's key, e.g. ``orders`` read inside
            ``WITH orders AS (SELECT id FROM orders)``.

    Example:
        >>> TableEntity("sales.customers", TableKind.BASE_TABLE, "c").registry_key
        'c'
        >>> TableEntity("sales.customers", TableKind.BASE_TABLE).registry_key
        'sales.customers'
        >>> TableEntity("orders", TableKind.BASE_TABLE, scope="orders").registry_key
        'orders::orders'
    """

    canonical_name: str
    kind: TableKind
    exposed_alias: Optional[str] = None
    scope: Optional[str] = None

    @property
    def reference_name(self) -> str:
        """Name the query uses for the entity: alias if present, else canonical name."""
        return self.exposed_alias or self.canonical_name

    @property
    def registry_key(self) -> str:
        """Key of the entity in the graph: the reference name, scope-qualified
        when the entity is shadowed by its enclosing scope."""
        if self.scope:
            return f"{self.scope}{SCOPE_SEPARATOR}{self.reference_name}"
        return self.reference_name

    @property
    def is_result(self) -> bool:
        return self.kind is TableKind.RESULT

    def scoped(self, scope: str) -> "TableEntity":
        """Copy of the entity keyed under ``scope``."""
        return replace(self, scope=scope)

    @classmethod
    def base_table(cls, name: str, alias: Optional[str] = None) -> "TableEntity":
        return cls(name, TableKind.BASE_TABLE, alias or None)

    @classmethod
    def cte(cls, name: str, alias: Optional[str] = None) -> "TableEntity":
        return cls(name, TableKind.CTE, alias or None)

    @classmethod
    def derived_subquery(cls, alias: str) -> "TableEntity":
        return cls(DERIVED_SUBQUERY_NAME, TableKind.DERIVED_SUBQUERY, alias)

    @classmethod
    def result(cls, name: str) -> "TableEntity":
        return cls(name, TableKind.RESULT)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (for serialization)."""
        return {
            "key": self.registry_key,
            "canonical_name": self.canonical_name,
            "alias": self.exposed_alias,
            "kind": self.kind.value,
            "scope": self.scope,
        }
