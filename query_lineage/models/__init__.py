"""
Data models for query lineage.

This package contains the core data structures: table entities, column
lineage records, expression shapes and configuration.
"""

from query_lineage.models.column_lineage import ColumnLineage, UnresolvedReference
from query_lineage.models.config import ErrorMode, LineageConfig
from query_lineage.models.expression_shape import ExpressionShape
from query_lineage.models.table_entity import TableEntity, TableKind

__all__ = [
    "ColumnLineage",
    "ErrorMode",
    "ExpressionShape",
    "LineageConfig",
    "TableEntity",
    "TableKind",
    "UnresolvedReference",
]
