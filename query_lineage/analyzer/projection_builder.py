"""
Projection lineage builder.

This module defines the ProjectionLineageBuilder class, which turns the
projection list of a SELECT into ColumnLineage records.
"""

from __future__ import annotations

from typing import Iterable, Optional

import sqlglot
from sqlglot import expressions

from query_lineage.analyzer.expression_walker import ExpressionWalker
from query_lineage.exceptions import UnresolvedReferenceError
from query_lineage.models.column_lineage import WILDCARD_NAME, ColumnLineage
from query_lineage.models.config import LineageConfig
from query_lineage.utils.ast_utils import render
from query_lineage.utils.diagnostics import DiagnosticCode, DiagnosticCollector


def is_wildcard(node: sqlglot.Expression) -> bool:
    """Check for ``*`` or ``t.*`` projections."""
    if isinstance(node, expressions.Star):
        return True
    return isinstance(node, expressions.Column) and isinstance(
        node.this, expressions.Star
    )


class ProjectionLineageBuilder:
    """Builds column lineage for the projection list of a SELECT.

    Three kinds of projection items are handled:
    1. ``expr AS alias``: output name is the alias, dependencies come from
       ``expr``.
    2. ``expr``: output name is the rendered expression.
    3. ``*`` / ``t.*``: one record named "*" without dependencies. Wildcards
       are not expanded into concrete columns.

    Usage:
        builder = ProjectionLineageBuilder(config, graph.diagnostics)
        columns = builder.build("monthly_sales", select, ["o", "c"])
    """

    def __init__(
        self,
        config: LineageConfig,
        diagnostics: Optional[DiagnosticCollector] = None,
        walker: Optional[ExpressionWalker] = None,
    ) -> None:
        self.config = config
        self.diagnostics = (
            diagnostics if diagnostics is not None else DiagnosticCollector()
        )
        self.walker = walker or ExpressionWalker()

    def build(
        self,
        context: str,
        select: expressions.Select,
        scope_keys: Iterable[str] = (),
    ) -> list[ColumnLineage]:
        """Build one ColumnLineage per projection item of ``select``.

        Args:
            context: Registry key under which the outputs are visible.
            select: SELECT node.
            scope_keys: Names (alias or table name) of the tables read by
                ``select``; used to tell resolved references from unresolved
                ones.

        Returns:
            ColumnLineage records in projection order.
        """
        scope = list(scope_keys)
        return [
            self._build_item(context, item, scope) for item in select.expressions
        ]

    def _build_item(
        self, context: str, item: sqlglot.Expression, scope: list[str]
    ) -> ColumnLineage:
        dialect = self.config.dialect

        if is_wildcard(item):
            return ColumnLineage(
                output_name=WILDCARD_NAME,
                context=context,
                source_expression=render(item, dialect),
                is_wildcard=True,
            )

        if isinstance(item, expressions.Alias):
            expression = item.this
            output_name = item.alias
        else:
            expression = item
            output_name = render(item, dialect)

        dependencies = self.walker.walk(expression)
        unresolved = [dep for dep in dependencies if not self._is_resolved(dep, scope)]

        for reference in dict.fromkeys(unresolved):
            self._report_unresolved(context, output_name, reference, scope)

        return ColumnLineage(
            output_name=output_name,
            context=context,
            source_expression=render(expression, dialect),
            dependencies=tuple(dependencies),
            unresolved=tuple(unresolved),
        )

    def _is_resolved(self, reference: str, scope: list[str]) -> bool:
        qualifier, dot, _ = reference.rpartition(".")
        if not dot:
            # Unqualified: only unambiguous with a single table in scope
            return len(scope) == 1
        return self.config.normalize(qualifier) in scope

    def _report_unresolved(
        self, context: str, output_name: str, reference: str, scope: list[str]
    ) -> None:
        if scope:
            reason = f"cannot be attributed to one of {len(scope)} table(s) in scope"
        else:
            reason = "has no table in scope"
        self.diagnostics.report(
            UnresolvedReferenceError(
                f"Reference '{reference}' in {context}.{output_name} {reason}",
                reference=reference,
                available_tables=scope,
            ),
            DiagnosticCode.UNRESOLVED_REFERENCE,
            self.config.on_unresolved,
            context=f"{context}.{output_name}",
        )
