"""
Expression dependency walker.

This module defines the ExpressionWalker class and the module-level walk()
helper, which traverse a sqlglot expression and return the identifiers it
reads. The walker first classifies a node into an ExpressionShape and then
dispatches to the matching handler, so every node kind lands in exactly one
documented arm.

Known precision limit: nodes classified as OTHER contribute no
dependencies. Identifiers inside CASE, CAST, IF, unary operators, scalar
subqueries, IN lists, BETWEEN bounds and window PARTITION BY / ORDER BY are
therefore not reported.
"""

from __future__ import annotations

import logging
from typing import Optional

import sqlglot
from sqlglot import expressions

from query_lineage.models.expression_shape import ExpressionShape
from query_lineage.utils.ast_utils import dotted_name

logger = logging.getLogger(__name__)

# Func subclasses that are not decomposed
_OPAQUE_FUNCTIONS = (expressions.Case, expressions.Cast, expressions.If)


def classify_expression(node: Optional[sqlglot.Expression]) -> ExpressionShape:
    """Map a sqlglot node to its ExpressionShape.

    Args:
        node: sqlglot expression node (None is accepted and maps to OTHER).

    Returns:
        The ExpressionShape of the node.

    Example:
        >>> node = sqlglot.parse_one("SELECT o.amount + 1").expressions[0]
        >>> classify_expression(node)
        <ExpressionShape.BINARY_OPERATION: 'binary_operation'>
    """
    if node is None:
        return ExpressionShape.OTHER

    if isinstance(node, expressions.Column):
        name = dotted_name(node)
        if name is None:
            return ExpressionShape.OTHER
        if "." in name:
            return ExpressionShape.COMPOUND_IDENTIFIER
        return ExpressionShape.IDENTIFIER

    if isinstance(node, expressions.Identifier):
        return ExpressionShape.IDENTIFIER

    if isinstance(node, expressions.Dot) and dotted_name(node) is not None:
        return ExpressionShape.COMPOUND_IDENTIFIER

    if isinstance(node, expressions.Binary):
        return ExpressionShape.BINARY_OPERATION

    if isinstance(node, expressions.Paren):
        return ExpressionShape.NESTED

    if isinstance(node, expressions.Window):
        return ExpressionShape.FUNCTION_CALL

    if isinstance(node, _OPAQUE_FUNCTIONS):
        return ExpressionShape.OTHER

    if isinstance(node, expressions.Func):
        return ExpressionShape.FUNCTION_CALL

    return ExpressionShape.OTHER


class ExpressionWalker:
    """Extracts the identifiers an expression reads.

    Dependencies are concatenated in first-seen order and never deduplicated:
    ``a + a`` yields ``["a", "a"]``.

    Example:
        >>> walker = ExpressionWalker()
        >>> node = sqlglot.parse_one("SELECT SUM(o.amount) + tax").expressions[0]
        >>> walker.walk(node)
        ['o.amount', 'tax']
    """

    def walk(self, node: Optional[sqlglot.Expression]) -> list[str]:
        """Return the identifiers read by ``node``.

        Never raises; unrecognized shapes yield an empty list.

        Args:
            node: sqlglot expression node.

        Returns:
            Ordered list of identifier strings.
        """
        shape = classify_expression(node)
        handler = getattr(self, f"_walk_{shape.value}")
        return handler(node)

    def _walk_identifier(self, node: sqlglot.Expression) -> list[str]:
        return [dotted_name(node)]

    def _walk_compound_identifier(self, node: sqlglot.Expression) -> list[str]:
        return [dotted_name(node)]

    def _walk_binary_operation(self, node: expressions.Binary) -> list[str]:
        return self.walk(node.left) + self.walk(node.right)

    def _walk_nested(self, node: expressions.Paren) -> list[str]:
        return self.walk(node.this)

    def _walk_function_call(self, node: sqlglot.Expression) -> list[str]:
        if isinstance(node, expressions.Window):
            # Only the windowed function; PARTITION BY / ORDER BY are not read
            return self.walk(node.this)

        dependencies: list[str] = []
        for arg in self._function_arguments(node):
            dependencies.extend(self.walk(arg))
        return dependencies

    def _walk_other(self, node: Optional[sqlglot.Expression]) -> list[str]:
        if node is not None:
            logger.debug(
                "No dependencies extracted from %s node", type(node).__name__
            )
        return []

    @staticmethod
    def _function_arguments(node: expressions.Func) -> list[sqlglot.Expression]:
        """Positional arguments of a function, in declared argument order."""
        arguments: list[sqlglot.Expression] = []
        for key in node.arg_types:
            value = node.args.get(key)
            if isinstance(value, sqlglot.Expression):
                arguments.append(value)
            elif isinstance(value, list):
                arguments.extend(
                    item for item in value if isinstance(item, sqlglot.Expression)
                )
        return arguments


_WALKER = ExpressionWalker()


def walk(expression: Optional[sqlglot.Expression]) -> list[str]:
    """Return the identifiers read by ``expression``.

    Example:
        >>> walk(sqlglot.parse_one("SELECT c.id").expressions[0])
        ['c.id']
    """
    return _WALKER.walk(expression)
