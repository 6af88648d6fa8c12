"""
SQL parser front door.

This module defines the SQLParser class, which converts SQL text into the
sqlglot ASTs consumed by the query graph builder.
"""

from typing import Optional

import sqlglot
from sqlglot.errors import ParseError, TokenError

from query_lineage.exceptions import SQLParseError
from query_lineage.models.config import LineageConfig


class SQLParser:
    """SQL parser that converts SQL text to sqlglot ASTs.

    Attributes:
        config: LineageConfig; its ``dialect`` selects the sqlglot reader.

    Example:
        >>> parser = SQLParser(LineageConfig(dialect="snowflake"))
        >>> statements = parser.parse("SELECT 1; SELECT 2")
        >>> len(statements)
        2
    """

    def __init__(self, config: Optional[LineageConfig] = None) -> None:
        """Initialize a SQLParser with configuration.

        Args:
            config: LineageConfig object containing parser configuration.
        """
        self.config = config or LineageConfig()

    def parse(self, sql: str) -> list[sqlglot.Expression]:
        """Parse SQL text into one AST per statement.

        Empty statements (e.g. a trailing semicolon) are dropped.

        Args:
            sql: SQL text, one or more statements.

        Returns:
            Parsed statements in textual order.

        Raises:
            SQLParseError: If the text is empty or cannot be parsed.
        """
        if not sql or not sql.strip():
            raise SQLParseError("SQL string cannot be empty")

        try:
            statements = sqlglot.parse(sql, read=self.config.dialect)
        except (ParseError, TokenError) as e:
            raise SQLParseError(
                f"SQL parsing error: {e}. SQL: {sql[:200]}..."
            ) from e

        parsed = [statement for statement in statements if statement is not None]
        if not parsed:
            raise SQLParseError(f"No SQL statement found in: {sql[:200]}")
        return parsed

    def parse_one(self, sql: str) -> sqlglot.Expression:
        """Parse SQL text that holds exactly one statement.

        Raises:
            SQLParseError: If the text is empty, cannot be parsed, or holds
                more than one statement.
        """
        statements = self.parse(sql)
        if len(statements) > 1:
            raise SQLParseError(
                f"Expected a single statement, got {len(statements)}"
            )
        return statements[0]
