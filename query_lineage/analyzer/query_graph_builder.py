"""
Query graph builder.

This module defines the QueryGraphBuilder class, which drives table
discovery and projection lineage over a whole query (CTEs in declaration
order, then the top-level body) and accumulates the results in a
DependencyGraph.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

import sqlglot
from sqlglot import expressions

from query_lineage.analyzer.projection_builder import ProjectionLineageBuilder
from query_lineage.analyzer.table_discovery import TableDiscovery
from query_lineage.exceptions import UnsupportedQueryShapeError
from query_lineage.graph.dependency_graph import DependencyGraph
from query_lineage.models.config import LineageConfig
from query_lineage.models.table_entity import TableEntity
from query_lineage.parser.sql_parser import SQLParser
from query_lineage.utils.ast_utils import (
    get_with_clause,
    is_plain_select,
    snippet,
    unwrap_parens,
)
from query_lineage.utils.diagnostics import DiagnosticCode

logger = logging.getLogger(__name__)

_SET_OPERATIONS = (expressions.Union, expressions.Intersect, expressions.Except)


class QueryGraphBuilder:
    """Builds a dependency graph from parsed query statements.

    Processing order per statement:
    1. Every CTE of the WITH clause, in declaration order: register the CTE,
       discover the tables it reads (edges into the CTE) and record its
       projections with the CTE name as context.
    2. The top-level body: discover its tables (edges into the result
       sentinel) and record its projections with the sentinel as context.

    Set operations and non-query statements produce no lineage and are
    reported as unsupported query shapes. Several statements may be added to
    the same builder; they share one graph and one result sentinel.

    Usage:
        builder = QueryGraphBuilder(config=LineageConfig(dialect="snowflake"))
        graph = builder.build(sqlglot.parse_one(sql, read="snowflake"))
        order = graph.topological_order()
    """

    def __init__(
        self,
        graph: Optional[DependencyGraph] = None,
        config: Optional[LineageConfig] = None,
    ) -> None:
        """
        Args:
            graph: Graph to fill. A new one is created when omitted.
            config: Lineage configuration.
        """
        self.config = config or LineageConfig()
        if graph is None:
            graph = DependencyGraph(self.config.result_name)
        self.graph = graph
        self.discovery = TableDiscovery(
            self.graph, self.config, subquery_handler=self.process_select
        )
        self.projections = ProjectionLineageBuilder(
            self.config, self.graph.diagnostics
        )

    def build(self, statement: sqlglot.Expression) -> DependencyGraph:
        """Add one statement and return the frozen graph."""
        return self.build_many([statement])

    def build_many(self, statements: Iterable[sqlglot.Expression]) -> DependencyGraph:
        """Add every statement and return the frozen graph."""
        for statement in statements:
            self.add_statement(statement)
        return self.graph.freeze()

    def add_statement(self, statement: sqlglot.Expression) -> None:
        """Add the lineage of one statement to the graph.

        Args:
            statement: Parsed statement (SELECT, set operation, or anything
                else sqlglot produces).
        """
        query = unwrap_parens(statement)
        result_name = self.graph.result_name

        if is_plain_select(query):
            self.process_select(query, result_name)
            return

        if isinstance(query, _SET_OPERATIONS):
            self.process_with(query)
            self._report_unsupported(query, "query body")
            return

        self._report_unsupported(query, "statement")

    def process_with(self, query: sqlglot.Expression) -> list[str]:
        """Register the CTEs of ``query``'s WITH clause, in declaration order.

        Returns:
            Registry keys of the registered CTEs.
        """
        with_clause = get_with_clause(query)
        if with_clause is None:
            return []

        recursive = bool(with_clause.args.get("recursive"))
        registered: list[str] = []

        for cte in with_clause.expressions:
            name = self.config.normalize(cte.alias)
            entity = TableEntity.cte(name)
            if name == self.graph.result_name:
                self.discovery.report_reserved(entity, cte)
                continue

            self.graph.register_table(entity)
            registered.append(name)
            logger.debug("Registered CTE '%s'", name)

            body = unwrap_parens(cte.this)
            if is_plain_select(body):
                self.process_select(body, name, recursive=recursive)
            else:
                self._report_unsupported(body, f"CTE '{name}'")

        return registered

    def process_select(
        self, select: expressions.Select, context: str, recursive: bool = False
    ) -> None:
        """Discover the tables and projections of one SELECT block.

        Args:
            select: SELECT node.
            context: Registry key that consumes this block's tables and owns
                its projected columns.
            recursive: True inside WITH RECURSIVE, where a CTE reading itself
                does not create a self-edge.
        """
        self.process_with(select)

        discovered = self.discovery.discover(select, context, recursive)
        for key, _ in discovered:
            if key == context and recursive:
                logger.debug("Skipping recursive self-reference of '%s'", key)
                continue
            self.graph.add_edge(key, context)

        # Columns are qualified by the name the query uses, not the registry key
        scope_names = [entity.reference_name for _, entity in discovered]
        for column in self.projections.build(context, select, scope_names):
            self.graph.add_column(column)

    def _report_unsupported(self, node: sqlglot.Expression, where: str) -> None:
        shape = type(node).__name__
        context = snippet(node, self.config.dialect)
        self.graph.diagnostics.report(
            UnsupportedQueryShapeError(
                f"Unsupported {shape} in {where}; no lineage extracted",
                shape=shape,
                context=context,
            ),
            DiagnosticCode.UNSUPPORTED_QUERY_SHAPE,
            self.config.on_unsupported,
            context=context,
        )


def build_dependency_graph(
    query: Union[sqlglot.Expression, Iterable[sqlglot.Expression]],
    config: Optional[LineageConfig] = None,
) -> DependencyGraph:
    """Build a dependency graph from one parsed statement or a sequence of them.

    Example:
        >>> ast = sqlglot.parse_one("WITH s AS (SELECT c.id FROM customers c) SELECT s.id FROM s")
        >>> build_dependency_graph(ast).topological_order()
        ['c', 's', '__result__']
    """
    builder = QueryGraphBuilder(config=config)
    if isinstance(query, sqlglot.Expression):
        return builder.build(query)
    return builder.build_many(query)


def analyze_sql(sql: str, config: Optional[LineageConfig] = None) -> DependencyGraph:
    """Parse SQL text (one or more statements) and build its dependency graph.

    Raises:
        SQLParseError: If the SQL text cannot be parsed.
    """
    config = config or LineageConfig()
    statements = SQLParser(config).parse(sql)
    return build_dependency_graph(statements, config)
