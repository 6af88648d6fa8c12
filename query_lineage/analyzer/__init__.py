"""
Query analysis module.

This package contains the ExpressionWalker that extracts the identifiers an
expression reads, TableDiscovery for FROM/JOIN clauses, the
ProjectionLineageBuilder for SELECT lists, and the QueryGraphBuilder that
drives them over a whole query.
"""

from query_lineage.analyzer.expression_walker import ExpressionWalker
from query_lineage.analyzer.projection_builder import ProjectionLineageBuilder
from query_lineage.analyzer.query_graph_builder import QueryGraphBuilder
from query_lineage.analyzer.table_discovery import TableDiscovery

__all__ = [
    "ExpressionWalker",
    "ProjectionLineageBuilder",
    "QueryGraphBuilder",
    "TableDiscovery",
]
