"""
SQL parser module.

This package contains the SQLParser class that converts SQL text to sqlglot
ASTs.
"""

from query_lineage.parser.sql_parser import SQLParser

__all__ = [
    "SQLParser",
]
