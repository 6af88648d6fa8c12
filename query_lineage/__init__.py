"""
Query Lineage

Table- and column-level dependency graphs for SQL queries: which tables,
CTEs and derived subqueries each part of a query reads, which identifiers
each projected column is computed from, and a safe evaluation order.

Example:
    >>> from query_lineage import analyze_sql
    >>> graph = analyze_sql(
    ...     "WITH s AS (SELECT c.id FROM customers c) SELECT s.id FROM s"
    ... )
    >>> graph.topological_order()
    ['c', 's', '__result__']
"""

from query_lineage.version import __version__, __version_info__

__author__ = "Query Lineage Contributors"

from query_lineage.analyzer.expression_walker import (
    ExpressionWalker,
    classify_expression,
    walk,
)
from query_lineage.analyzer.projection_builder import ProjectionLineageBuilder
from query_lineage.analyzer.query_graph_builder import (
    QueryGraphBuilder,
    analyze_sql,
    build_dependency_graph,
)
from query_lineage.analyzer.table_discovery import TableDiscovery
from query_lineage.exceptions import (
    CycleDetectedError,
    LineageError,
    SQLParseError,
    UnaliasedDerivedTableError,
    UnresolvedReferenceError,
    UnsupportedQueryShapeError,
)
from query_lineage.graph.algorithms import (
    downstream_tables,
    find_cycles,
    has_cycle,
    incoming_dependencies,
    topological_order,
    upstream_tables,
)
from query_lineage.graph.dependency_graph import DependencyGraph
from query_lineage.models.column_lineage import ColumnLineage, UnresolvedReference
from query_lineage.models.config import ErrorMode, LineageConfig
from query_lineage.models.expression_shape import ExpressionShape
from query_lineage.models.table_entity import TableEntity, TableKind
from query_lineage.parser.sql_parser import SQLParser
from query_lineage.utils.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticCollector,
)

__all__ = [
    # Version info
    "__version__",
    "__version_info__",
    # Entry points
    "analyze_sql",
    "build_dependency_graph",
    "QueryGraphBuilder",
    # Components
    "ExpressionWalker",
    "classify_expression",
    "walk",
    "TableDiscovery",
    "ProjectionLineageBuilder",
    "SQLParser",
    # Configuration
    "LineageConfig",
    "ErrorMode",
    # Data models
    "TableEntity",
    "TableKind",
    "ColumnLineage",
    "UnresolvedReference",
    "ExpressionShape",
    "DependencyGraph",
    # Graph algorithms
    "topological_order",
    "incoming_dependencies",
    "find_cycles",
    "has_cycle",
    "upstream_tables",
    "downstream_tables",
    # Diagnostics
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticCollector",
    # Exceptions
    "LineageError",
    "SQLParseError",
    "UnsupportedQueryShapeError",
    "UnaliasedDerivedTableError",
    "UnresolvedReferenceError",
    "CycleDetectedError",
]
