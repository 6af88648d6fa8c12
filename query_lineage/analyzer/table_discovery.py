"""
Table discovery for FROM and JOIN clauses.

This module defines the TableDiscovery class, which turns the table factors
of a SELECT into TableEntity records and registers them in the dependency
graph.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import sqlglot
from sqlglot import expressions

from query_lineage.exceptions import (
    UnaliasedDerivedTableError,
    UnsupportedQueryShapeError,
)
from query_lineage.graph.dependency_graph import DependencyGraph
from query_lineage.models.config import LineageConfig
from query_lineage.models.table_entity import TableEntity, TableKind
from query_lineage.utils.ast_utils import (
    extract_table_name,
    get_alias,
    get_table_factors,
    is_named_table,
    is_plain_select,
    snippet,
    unwrap_parens,
)
from query_lineage.utils.diagnostics import DiagnosticCode

logger = logging.getLogger(__name__)

# (select body, context key) -> None
SubqueryHandler = Callable[[expressions.Select, str], None]

Discovered = tuple[str, TableEntity]


class TableDiscovery:
    """Discovers the tables read by a SELECT.

    Responsibilities:
    1. Named tables become BASE_TABLE entities, unless they name a CTE that
       is already registered, in which case the CTE is reused. Inside a
       non-recursive CTE body the CTE's own name refers to the table, not to
       the CTE.
    2. Aliased subqueries become DERIVED_SUBQUERY entities and their body is
       handed to ``subquery_handler`` with the alias as context.
    3. Unaliased subqueries and other table factors (UNNEST, table
       functions, VALUES) are reported and skipped.
    4. A table whose key equals the key of the scope being built is keyed
       under that scope (``orders::orders``). A table whose key is the
       result sentinel's key is reported and skipped.

    Usage:
        discovery = TableDiscovery(graph, config, builder.process_select)
        for key, entity in discovery.discover(select, context="monthly_sales"):
            ...
    """

    def __init__(
        self,
        graph: DependencyGraph,
        config: LineageConfig,
        subquery_handler: Optional[SubqueryHandler] = None,
    ) -> None:
        """
        Args:
            graph: Graph that receives the discovered entities.
            config: Lineage configuration.
            subquery_handler: Called with (body, alias) for every aliased
                derived table whose body is a plain SELECT.
        """
        self.graph = graph
        self.config = config
        self.subquery_handler = subquery_handler

    def discover(
        self,
        select: expressions.Select,
        context: Optional[str] = None,
        recursive: bool = False,
    ) -> list[Discovered]:
        """Register and return the tables read by ``select``.

        Args:
            select: SELECT node whose FROM/JOIN clauses are scanned.
            context: Registry key of the scope ``select`` builds, if any.
            recursive: True inside WITH RECURSIVE, where a CTE may read
                itself.

        Returns:
            (registry key, TableEntity) pairs in textual order.
        """
        discovered: list[Discovered] = []

        for factor in get_table_factors(select):
            if is_named_table(factor):
                entry = self._discover_table(factor, context, recursive)
            elif isinstance(factor, expressions.Subquery):
                entry = self._discover_subquery(factor, context)
            else:
                self._report_unsupported(factor)
                entry = None

            if entry is not None:
                discovered.append(entry)

        return discovered

    def _discover_table(
        self, table: expressions.Table, context: Optional[str], recursive: bool
    ) -> Optional[Discovered]:
        name = self.config.normalize(extract_table_name(table))
        alias = get_alias(table)
        if alias is not None:
            alias = self.config.normalize(alias)

        cte = self._find_cte(name)
        if cte is not None and name == context and not recursive:
            # A CTE is not visible inside its own non-recursive body
            cte = None

        if cte is not None:
            if alias is None or alias == name:
                return name, cte
            entity = TableEntity.cte(name, alias)
            if not self._register(entity, table, context):
                return None
            entity = self.graph.get_table(self._key_for(entity, context))
            if not (recursive and name == context):
                # Aliased CTE reference: link the alias back to the CTE
                self.graph.add_edge(name, entity.registry_key)
            return entity.registry_key, entity

        entity = TableEntity.base_table(name, alias)
        if not self._register(entity, table, context):
            return None
        entity = self.graph.get_table(self._key_for(entity, context))
        logger.debug("Discovered table %s as '%s'", name, entity.registry_key)
        return entity.registry_key, entity

    def _discover_subquery(
        self, subquery: expressions.Subquery, context: Optional[str]
    ) -> Optional[Discovered]:
        alias = get_alias(subquery)
        if alias is None:
            self.graph.diagnostics.report(
                UnaliasedDerivedTableError(
                    "Derived table without an alias cannot be referenced; skipped",
                    context=snippet(subquery, self.config.dialect),
                ),
                DiagnosticCode.UNALIASED_DERIVED_TABLE,
                self.config.on_unaliased_subquery,
                context=snippet(subquery, self.config.dialect),
            )
            return None

        alias = self.config.normalize(alias)
        entity = TableEntity.derived_subquery(alias)
        if not self._register(entity, subquery, context):
            return None
        key = self._key_for(entity, context)

        body = unwrap_parens(subquery.this)
        if is_plain_select(body):
            if self.subquery_handler is not None:
                self.subquery_handler(body, key)
        else:
            self._report_unsupported(body, f"derived table '{key}'")

        return key, self.graph.get_table(key)

    def _key_for(self, entity: TableEntity, context: Optional[str]) -> str:
        if context is not None and entity.registry_key == context:
            return entity.scoped(context).registry_key
        return entity.registry_key

    def _register(
        self, entity: TableEntity, node: sqlglot.Expression, context: Optional[str]
    ) -> bool:
        """Register ``entity``, keyed under ``context`` when it would shadow it.

        Returns:
            False if the entity was skipped because its key is reserved.
        """
        if entity.registry_key == self.graph.result_name:
            self.report_reserved(entity, node)
            return False
        if context is not None and entity.registry_key == context:
            entity = entity.scoped(context)
        self.graph.register_table(entity)
        return True

    def _find_cte(self, name: str) -> Optional[TableEntity]:
        entity = self.graph.get_table(name)
        if (
            entity is not None
            and entity.kind is TableKind.CTE
            and entity.exposed_alias is None
        ):
            return entity
        return None

    def report_reserved(self, entity: TableEntity, node: sqlglot.Expression) -> None:
        """Report an entity whose key collides with the result sentinel."""
        context = snippet(node, self.config.dialect)
        self.graph.diagnostics.report(
            UnsupportedQueryShapeError(
                f"{entity.kind.value} '{entity.canonical_name}' uses the reserved "
                f"key '{entity.registry_key}'; skipped",
                shape=type(node).__name__,
                context=context,
            ),
            DiagnosticCode.RESERVED_KEY,
            self.config.on_unsupported,
            context=context,
        )

    def _report_unsupported(
        self, node: sqlglot.Expression, where: str = "FROM clause"
    ) -> None:
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
