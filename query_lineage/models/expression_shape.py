"""
Expression shape model.

This module defines the ExpressionShape enum, the closed set of expression
forms the dependency walker distinguishes. Every sqlglot node maps to exactly
one shape; anything the walker does not decompose maps to OTHER.
"""

from enum import Enum


class ExpressionShape(str, Enum):
    """Enumeration of expression shapes understood by the dependency walker.

    Attributes:
        IDENTIFIER: Unqualified column or bare identifier, e.g. ``amount``.
        COMPOUND_IDENTIFIER: Dotted reference, e.g. ``o.amount`` or
            ``db.schema.t.col``. Recorded as a single dotted string.
        BINARY_OPERATION: Two operands, e.g. ``a + b``, ``a = b``, ``a AND b``.
        FUNCTION_CALL: Function with positional arguments, e.g. ``SUM(x)``,
            ``COALESCE(a, b)``. A windowed call contributes its function
            arguments only.
        NESTED: Parenthesized expression, e.g. ``(a + b)``.
        OTHER: Literals, unary operators, CASE, CAST, IF, subqueries, IN,
            BETWEEN, stars, named arguments and every shape not listed above.
            These contribute no dependencies.

    Example:
        >>> ExpressionShape.NESTED.value
        'nested'
    """

    IDENTIFIER = "identifier"
    COMPOUND_IDENTIFIER = "compound_identifier"
    BINARY_OPERATION = "binary_operation"
    FUNCTION_CALL = "function_call"
    NESTED = "nested"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        """Return a list of all possible shape values."""
        return [member.value for member in cls]
