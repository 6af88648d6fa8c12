"""
AST utility functions for sqlglot trees.

This module provides small accessors over sqlglot expressions: clause
lookups that work across sqlglot releases, table name extraction, dotted
identifier rendering and expression rendering.
"""

from typing import Optional

import sqlglot
from sqlglot import expressions


def _get_arg(node: sqlglot.Expression, name: str) -> Optional[sqlglot.Expression]:
    # sqlglot >= 28 suffixes args that clash with Python keywords ("from_", "with_")
    value = node.args.get(f"{name}_")
    if value is None:
        value = node.args.get(name)
    return value


def is_plain_select(node: Optional[sqlglot.Expression]) -> bool:
    """Check if the node is a plain SELECT (not a set operation).

    Example:
        >>> is_plain_select(sqlglot.parse_one("SELECT id FROM users"))
        True
        >>> is_plain_select(sqlglot.parse_one("SELECT 1 UNION SELECT 2"))
        False
    """
    return isinstance(node, expressions.Select)


def unwrap_parens(node: sqlglot.Expression) -> sqlglot.Expression:
    """Strip unaliased parentheses around a query: ``((SELECT 1))`` -> ``SELECT 1``."""
    while isinstance(node, expressions.Subquery) and not node.alias and node.this:
        node = node.this
    return node


def get_with_clause(node: sqlglot.Expression) -> Optional[expressions.With]:
    """Return the WITH clause attached to a query node, if any.

    Example:
        >>> ast = sqlglot.parse_one("WITH s AS (SELECT 1 AS x) SELECT x FROM s")
        >>> [cte.alias for cte in get_with_clause(ast).expressions]
        ['s']
    """
    with_clause = _get_arg(node, "with")
    return with_clause if isinstance(with_clause, expressions.With) else None


def get_from_clause(select: sqlglot.Expression) -> Optional[expressions.From]:
    """Return the FROM clause of a SELECT, if any."""
    from_clause = _get_arg(select, "from")
    return from_clause if isinstance(from_clause, expressions.From) else None


def get_table_factors(select: sqlglot.Expression) -> list[sqlglot.Expression]:
    """Return the FROM item and every JOIN target of a SELECT, in textual order.

    Comma-separated FROM lists are parsed by sqlglot as joins, so they are
    covered too.

    Example:
        >>> ast = sqlglot.parse_one("SELECT 1 FROM a JOIN b ON a.id = b.id, c")
        >>> [t.name for t in get_table_factors(ast)]
        ['a', 'b', 'c']
    """
    factors: list[sqlglot.Expression] = []

    from_clause = get_from_clause(select)
    if from_clause is not None:
        if from_clause.this is not None:
            factors.append(from_clause.this)
        factors.extend(from_clause.expressions or [])

    for join in select.args.get("joins") or []:
        if join.this is not None:
            factors.append(join.this)

    return factors


def is_named_table(node: sqlglot.Expression) -> bool:
    """Check if the node references a table by name (not a table function)."""
    return isinstance(node, expressions.Table) and isinstance(
        node.this, expressions.Identifier
    )


def extract_table_name(table_node: expressions.Table) -> str:
    """Return the fully-qualified name of a table reference.

    Example:
        >>> ast = sqlglot.parse_one("SELECT 1 FROM prod.sales.orders o")
        >>> extract_table_name(get_table_factors(ast)[0])
        'prod.sales.orders'
    """
    return ".".join(part.name for part in table_node.parts)


def get_alias(node: sqlglot.Expression) -> Optional[str]:
    """Return the alias of a table factor or projection, or None."""
    alias = node.alias
    return alias or None


def dotted_name(node: sqlglot.Expression) -> Optional[str]:
    """Render a column or identifier chain as a dotted string.

    Returns None when the node is not made of identifiers only (e.g. ``t.*``
    or a struct access on a function result).

    Example:
        >>> column = sqlglot.parse_one("SELECT a.b.c").expressions[0]
        >>> dotted_name(column)
        'a.b.c'
    """
    if isinstance(node, expressions.Column):
        parts = node.parts
        if not parts or not all(
            isinstance(part, expressions.Identifier) for part in parts
        ):
            return None
        return ".".join(part.name for part in parts)

    if isinstance(node, expressions.Identifier):
        return node.name

    if isinstance(node, expressions.Dot):
        left = dotted_name(node.this)
        right = node.expression
        if left is not None and isinstance(right, expressions.Identifier):
            return f"{left}.{right.name}"

    return None


def render(node: sqlglot.Expression, dialect: Optional[str] = None) -> str:
    """Render an expression back to SQL text."""
    return node.sql(dialect=dialect)


def snippet(node: sqlglot.Expression, dialect: Optional[str] = None, limit: int = 120) -> str:
    """Render an expression for diagnostics, truncated to ``limit`` characters."""
    text = render(node, dialect)
    return text if len(text) <= limit else text[: limit - 3] + "..."
