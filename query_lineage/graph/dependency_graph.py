"""
Dependency graph for query lineage.

This module defines the DependencyGraph class, the aggregate produced by the
query graph builder. Table entities are nodes of a networkx DiGraph, edges
point from producer to consumer, and column lineage records are kept in
insertion order next to it.
"""

from __future__ import annotations

import json
import logging
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

import networkx as nx

from query_lineage.exceptions import LineageError
from query_lineage.models.column_lineage import ColumnLineage, UnresolvedReference
from query_lineage.models.table_entity import TableEntity
from query_lineage.utils.diagnostics import DiagnosticCode, DiagnosticCollector

logger = logging.getLogger(__name__)

DEFAULT_RESULT_NAME = "__result__"


class DependencyGraph:
    """Table and column dependency graph of one analysis.

    The sentinel result entity is registered on construction, so it is
    present exactly once whatever the input. Once frozen (the builder
    freezes every graph it returns) the mutators raise LineageError.

    Attributes:
        graph: Read-only networkx view; nodes are registry keys.
        result_name: Registry key of the sentinel result entity.
        diagnostics: Irregularities recorded while the graph was built.

    Example:
        >>> graph = DependencyGraph()
        >>> graph.register_table(TableEntity.base_table("orders", "o"))
        >>> graph.add_edge("o", graph.result_name)
        >>> graph.topological_order()
        ['o', '__result__']
    """

    def __init__(self, result_name: str = DEFAULT_RESULT_NAME) -> None:
        """Initialize a DependencyGraph with its sentinel result entity.

        Args:
            result_name: Registry key of the sentinel result entity.
        """
        self._graph = nx.DiGraph()
        self.result_name = result_name
        self.diagnostics = DiagnosticCollector()
        self._tables: dict[str, TableEntity] = {}
        self._columns: list[ColumnLineage] = []
        self._edges: list[tuple[str, str]] = []
        self._frozen = False

        self.register_table(TableEntity.result(result_name))

    # === Construction ===

    def register_table(self, entity: TableEntity) -> Optional[TableEntity]:
        """Register a table entity under its registry key.

        Registration is last-write-wins: a different entity already stored
        under the same key is replaced and a KEY_OVERWRITTEN diagnostic is
        recorded. Registering an equal entity again is a no-op.

        Args:
            entity: TableEntity to register.

        Returns:
            The replaced entity, or None.

        Raises:
            LineageError: If the graph is frozen, or if the sentinel result
                entity would be replaced.
        """
        self._check_mutable()
        key = entity.registry_key
        existing = self._tables.get(key)

        if existing == entity:
            return None

        if existing is not None:
            if existing.is_result:
                raise LineageError(
                    f"Cannot replace the result entity '{key}' with "
                    f"{entity.kind.value} '{entity.canonical_name}'"
                )
            message = (
                f"Table key '{key}' redefined: {existing.kind.value} "
                f"'{existing.canonical_name}' replaced by {entity.kind.value} "
                f"'{entity.canonical_name}'"
            )
            logger.info(message)
            self.diagnostics.add("INFO", DiagnosticCode.KEY_OVERWRITTEN, message)

        self._tables[key] = entity
        self._graph.add_node(key)
        return existing

    def add_column(self, lineage: ColumnLineage) -> None:
        """Append a column lineage record."""
        self._check_mutable()
        self._columns.append(lineage)

    def add_edge(self, producer: str, consumer: str) -> bool:
        """Add a producer -> consumer edge.

        Endpoints that are not registered tables are tolerated; they are
        reported by unresolved_table_keys().

        Args:
            producer: Registry key that must be evaluated first.
            consumer: Registry key that reads the producer.

        Returns:
            True if the edge was new, False if it already existed.
        """
        self._check_mutable()
        if self._graph.has_edge(producer, consumer):
            return False
        self._graph.add_edge(producer, consumer)
        self._edges.append((producer, consumer))
        return True

    def freeze(self) -> "DependencyGraph":
        """Make the graph and its diagnostics read-only and return it."""
        self._frozen = True
        self.diagnostics.freeze()
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise LineageError("Dependency graph is frozen and cannot be modified")

    # === Read access ===

    @property
    def graph(self) -> nx.DiGraph:
        """Read-only view of the underlying DiGraph."""
        return self._graph.copy(as_view=True)

    @property
    def tables(self) -> Mapping[str, TableEntity]:
        """Read-only mapping of registry key to TableEntity, in registration order."""
        return MappingProxyType(self._tables)

    @property
    def columns(self) -> tuple[ColumnLineage, ...]:
        """Column lineage records in insertion order."""
        return tuple(self._columns)

    @property
    def edges(self) -> list[tuple[str, str]]:
        """Producer -> consumer edges in insertion order."""
        return list(self._edges)

    @property
    def result(self) -> TableEntity:
        return self._tables[self.result_name]

    def __contains__(self, key: object) -> bool:
        return key in self._tables

    def __iter__(self) -> Iterator[TableEntity]:
        return iter(list(self._tables.values()))

    def __len__(self) -> int:
        return len(self._tables)

    def get_table(self, key: str) -> Optional[TableEntity]:
        return self._tables.get(key)

    def columns_for(self, context: str) -> list[ColumnLineage]:
        """Column lineage records whose context is ``context``."""
        return [column for column in self._columns if column.context == context]

    def unresolved_references(self) -> list[UnresolvedReference]:
        """Every column dependency that could not be attributed to a table."""
        return [
            UnresolvedReference(column.context, column.output_name, reference)
            for column in self._columns
            for reference in column.unresolved
        ]

    def unresolved_table_keys(self) -> list[str]:
        """Edge endpoints with no registered table entity, sorted."""
        return sorted(node for node in self._graph.nodes if node not in self._tables)

    @property
    def is_complete(self) -> bool:
        """True when no column or edge carries an unresolved reference."""
        return not self.unresolved_references() and not self.unresolved_table_keys()

    # === Graph algorithms ===

    def topological_order(self) -> list[str]:
        """See query_lineage.graph.algorithms.topological_order."""
        from query_lineage.graph.algorithms import topological_order

        return topological_order(self)

    def incoming_dependencies(self, key: str) -> list[TableEntity]:
        """See query_lineage.graph.algorithms.incoming_dependencies."""
        from query_lineage.graph.algorithms import incoming_dependencies

        return incoming_dependencies(self, key)

    def find_cycles(self) -> list[list[str]]:
        """See query_lineage.graph.algorithms.find_cycles."""
        from query_lineage.graph.algorithms import find_cycles

        return find_cycles(self)

    def has_cycle(self) -> bool:
        from query_lineage.graph.algorithms import has_cycle

        return has_cycle(self)

    # === Export ===

    def to_dict(self) -> dict[str, Any]:
        """Export graph to dictionary format (for JSON serialization)."""
        return {
            "result": self.result_name,
            "tables": [entity.to_dict() for entity in self._tables.values()],
            "columns": [column.to_dict() for column in self._columns],
            "edges": [
                {"producer": producer, "consumer": consumer}
                for producer, consumer in self._edges
            ],
            "unresolved_tables": self.unresolved_table_keys(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def get_statistics(self) -> dict[str, int]:
        """Get graph statistics."""
        return {
            "total_tables": len(self._tables),
            "total_columns": len(self._columns),
            "total_edges": len(self._edges),
            "unresolved_references": len(self.unresolved_references()),
        }

    def __repr__(self) -> str:
        return (
            f"DependencyGraph(tables={len(self._tables)}, "
            f"columns={len(self._columns)}, edges={len(self._edges)})"
        )
