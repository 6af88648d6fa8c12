"""
Tests for TableDiscovery.

This module checks how FROM and JOIN table factors are turned into table
entities, independently of the graph builder.
"""

import pytest
import sqlglot

from query_lineage import (
    DependencyGraph,
    DiagnosticCode,
    LineageConfig,
    TableDiscovery,
    TableEntity,
    TableKind,
    UnsupportedQueryShapeError,
)


class RecordingHandler:
    """Subquery handler that records the bodies it receives."""

    def __init__(self):
        self.calls = []

    def __call__(self, body, alias):
        self.calls.append((body.sql(), alias))


def discover(sql, graph=None, config=None, handler=None, context=None):
    if graph is None:
        graph = DependencyGraph()
    config = config or LineageConfig()
    discovery = TableDiscovery(graph, config, handler)
    select = sqlglot.parse_one(sql, read=config.dialect)
    return graph, discovery.discover(select, context)


class TestNamedTables:
    """Tests for named table factors."""

    def test_aliased_table(self):
        """Test that the alias is the registry key."""
        graph, found = discover("SELECT 1 FROM orders o")

        assert found == [("o", TableEntity.base_table("orders", "o"))]
        assert graph.tables["o"] == TableEntity.base_table("orders", "o")

    def test_textual_order(self):
        """Test FROM item first, then JOIN targets in order."""
        _, found = discover(
            "SELECT 1 FROM a JOIN b ON a.id = b.id LEFT JOIN c ON b.id = c.id"
        )

        assert [key for key, _ in found] == ["a", "b", "c"]

    def test_discovery_adds_no_edges(self):
        """Test that edges are left to the caller."""
        graph, _ = discover("SELECT 1 FROM a JOIN b ON a.id = b.id")

        assert graph.edges == []

    def test_known_cte_is_reused(self):
        """Test that a registered CTE is returned instead of a base table."""
        graph = DependencyGraph()
        graph.register_table(TableEntity.cte("recent"))

        _, found = discover("SELECT 1 FROM recent", graph=graph)

        assert found == [("recent", TableEntity.cte("recent"))]
        assert len(graph) == 2

    def test_aliased_cte_reference(self):
        """Test that an aliased CTE reference is linked to the CTE."""
        graph = DependencyGraph()
        graph.register_table(TableEntity.cte("recent"))

        _, found = discover("SELECT 1 FROM recent r", graph=graph)

        assert found == [("r", TableEntity.cte("recent", "r"))]
        assert graph.edges == [("recent", "r")]

    def test_cte_aliased_by_its_own_name(self):
        """Test `FROM recent AS recent`."""
        graph = DependencyGraph()
        graph.register_table(TableEntity.cte("recent"))

        _, found = discover("SELECT 1 FROM recent AS recent", graph=graph)

        assert found == [("recent", TableEntity.cte("recent"))]
        assert graph.edges == []

    def test_normalize_case(self):
        """Test lower-cased keys."""
        _, found = discover(
            "SELECT 1 FROM Sales.Orders O", config=LineageConfig(normalize_case=True)
        )

        assert found == [("o", TableEntity.base_table("sales.orders", "o"))]


class TestSubqueries:
    """Tests for derived table factors."""

    def test_aliased_subquery_calls_handler(self):
        """Test that the body is handed over with the alias as context."""
        handler = RecordingHandler()
        graph, found = discover(
            "SELECT 1 FROM (SELECT a FROM src) AS t", handler=handler
        )

        assert found == [("t", TableEntity.derived_subquery("t"))]
        assert graph.tables["t"].kind is TableKind.DERIVED_SUBQUERY
        assert handler.calls == [("SELECT a FROM src", "t")]

    def test_unaliased_subquery_is_skipped(self):
        """Test that nothing is registered for an unaliased subquery."""
        handler = RecordingHandler()
        graph, found = discover("SELECT 1 FROM (SELECT a FROM src)", handler=handler)

        assert found == []
        assert handler.calls == []
        assert len(graph) == 1
        diagnostic = graph.diagnostics.get_all()[0]
        assert diagnostic.code is DiagnosticCode.UNALIASED_DERIVED_TABLE
        assert diagnostic.level == "WARNING"

    def test_non_select_body_is_reported(self):
        """Test a derived table whose body is a set operation."""
        handler = RecordingHandler()
        graph, found = discover(
            "SELECT 1 FROM (SELECT a FROM x UNION SELECT a FROM y) AS t",
            handler=handler,
        )

        assert [key for key, _ in found] == ["t"]
        assert handler.calls == []
        codes = [d.code for d in graph.diagnostics]
        assert codes == [DiagnosticCode.UNSUPPORTED_QUERY_SHAPE]

    def test_unsupported_factor_strict(self):
        """Test FAIL mode for a table function."""
        with pytest.raises(UnsupportedQueryShapeError) as exc_info:
            discover(
                "SELECT x FROM UNNEST(ARRAY[1, 2]) AS u(x)",
                config=LineageConfig.strict(dialect="postgres"),
            )
        assert exc_info.value.shape == "Unnest"


class TestScopedKeys:
    """Tests for tables that share a key with the scope being built."""

    def test_table_named_like_context_is_scoped(self):
        """Test that the table is keyed under the scope it feeds."""
        graph, found = discover("SELECT id FROM orders", context="orders")

        entity = TableEntity.base_table("orders").scoped("orders")
        assert found == [("orders::orders", entity)]
        assert graph.tables["orders::orders"] == entity
        assert "orders" not in graph

    def test_cte_hidden_in_its_own_body(self):
        """Test that a non-recursive CTE body reads the table of the same name."""
        graph = DependencyGraph()
        graph.register_table(TableEntity.cte("orders"))

        _, found = discover("SELECT id FROM orders", graph=graph, context="orders")

        assert [key for key, _ in found] == ["orders::orders"]
        assert found[0][1].kind is TableKind.BASE_TABLE
        assert graph.tables["orders"].kind is TableKind.CTE

    def test_derived_alias_shadowing_inner_table(self):
        """Test the handler receives the derived key for its inner scope."""
        handler = RecordingHandler()
        graph, found = discover(
            "SELECT 1 FROM (SELECT id FROM orders) orders", handler=handler
        )

        assert found == [("orders", TableEntity.derived_subquery("orders"))]
        assert handler.calls == [("SELECT id FROM orders", "orders")]

    def test_reserved_key_is_reported(self):
        """Test that a table keyed like the result sentinel is skipped."""
        graph, found = discover("SELECT 1 FROM t AS __result__")

        assert found == []
        assert len(graph) == 1
        assert graph.result.kind is TableKind.RESULT
        (diagnostic,) = graph.diagnostics
        assert diagnostic.code is DiagnosticCode.RESERVED_KEY
        assert "__result__" in diagnostic.message
