"""
Graph algorithms over a DependencyGraph.

Evaluation order, cycle detection and producer/consumer queries. All
functions are read-only; none of them modifies the graph.
"""

from __future__ import annotations

import networkx as nx

from query_lineage.exceptions import CycleDetectedError
from query_lineage.graph.dependency_graph import DependencyGraph
from query_lineage.models.table_entity import TableEntity


def topological_order(graph: DependencyGraph) -> list[str]:
    """Return registry keys so that every producer precedes its consumers.

    Nodes that are eligible at the same time are emitted in lexicographic
    order, which makes the result reproducible across runs.

    Args:
        graph: DependencyGraph to order.

    Returns:
        Every node of the graph, ordered.

    Raises:
        CycleDetectedError: If no valid order exists. ``keys`` holds every
            node that takes part in a cycle.

    Example:
        >>> graph = DependencyGraph()
        >>> graph.register_table(TableEntity.cte("b"))
        >>> graph.register_table(TableEntity.base_table("a"))
        >>> graph.add_edge("a", "b")
        >>> topological_order(graph)
        ['__result__', 'a', 'b']
    """
    try:
        return list(nx.lexicographical_topological_sort(graph.graph))
    except nx.NetworkXUnfeasible as e:
        raise CycleDetectedError(cycle_members(graph)) from e


def cycle_members(graph: DependencyGraph) -> set[str]:
    """Return every key that lies on a cycle (self-loops included)."""
    members: set[str] = set()
    for component in nx.strongly_connected_components(graph.graph):
        if len(component) > 1:
            members.update(component)
        else:
            (node,) = component
            if graph.graph.has_edge(node, node):
                members.add(node)
    return members


def find_cycles(graph: DependencyGraph) -> list[list[str]]:
    """Return the elementary cycles of the graph, each rotated to start at
    its smallest key, sorted."""
    cycles = []
    for cycle in nx.simple_cycles(graph.graph):
        start = cycle.index(min(cycle))
        cycles.append(cycle[start:] + cycle[:start])
    return sorted(cycles)


def has_cycle(graph: DependencyGraph) -> bool:
    return not nx.is_directed_acyclic_graph(graph.graph)


def incoming_dependencies(graph: DependencyGraph, key: str) -> list[TableEntity]:
    """Return the direct producers of ``key``, sorted by registry key.

    Unknown keys have no producers. Producers without a registered entity
    are skipped (see DependencyGraph.unresolved_table_keys).

    Example:
        >>> graph = DependencyGraph()
        >>> graph.register_table(TableEntity.base_table("orders", "o"))
        >>> graph.add_edge("o", graph.result_name)
        >>> [t.registry_key for t in incoming_dependencies(graph, "__result__")]
        ['o']
    """
    if key not in graph.graph:
        return []
    return [
        graph.tables[producer]
        for producer in sorted(graph.graph.predecessors(key))
        if producer in graph.tables
    ]


def upstream_tables(graph: DependencyGraph, key: str) -> list[str]:
    """All keys ``key`` depends on, directly or transitively, sorted."""
    if key not in graph.graph:
        return []
    return sorted(nx.ancestors(graph.graph, key))


def downstream_tables(graph: DependencyGraph, key: str) -> list[str]:
    """All keys that depend on ``key``, directly or transitively, sorted."""
    if key not in graph.graph:
        return []
    return sorted(nx.descendants(graph.graph, key))
