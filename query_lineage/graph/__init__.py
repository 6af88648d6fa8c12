"""
Dependency graph module.

This package contains the DependencyGraph aggregate and the graph
algorithms (evaluation order, cycle detection, producer queries) over it.
"""

from query_lineage.graph.dependency_graph import DependencyGraph

__all__ = [
    "DependencyGraph",
]
