"""
Tests for SQLParser.
"""

import pytest
from sqlglot import exp

from query_lineage import LineageConfig, SQLParseError, SQLParser


class TestSQLParser:
    """Tests for SQLParser."""

    def test_parse_single(self):
        """Test one statement."""
        statements = SQLParser().parse("SELECT a FROM t")

        assert len(statements) == 1
        assert isinstance(statements[0], exp.Select)

    def test_parse_multiple(self):
        """Test several statements with a trailing semicolon."""
        statements = SQLParser().parse("SELECT 1; SELECT 2;")

        assert len(statements) == 2

    @pytest.mark.parametrize("sql", ["", "   ", "\n\t"])
    def test_empty(self, sql):
        """Test empty input."""
        with pytest.raises(SQLParseError):
            SQLParser().parse(sql)

    def test_invalid_sql(self):
        """Test a syntax error."""
        with pytest.raises(SQLParseError):
            SQLParser().parse("SELECT (a FROM t")

    def test_dialect(self):
        """Test dialect-specific syntax."""
        parser = SQLParser(LineageConfig(dialect="snowflake"))
        statement = parser.parse_one("SELECT t.v:id FROM raw.events t")

        assert isinstance(statement, exp.Select)

    def test_parse_one_rejects_multiple(self):
        """Test parse_one with two statements."""
        with pytest.raises(SQLParseError):
            SQLParser().parse_one("SELECT 1; SELECT 2")
