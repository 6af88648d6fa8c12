"""
Tests for data models and configuration.

This module contains tests for TableEntity, ColumnLineage, LineageConfig and
the exception classes.
"""

import dataclasses

import pytest

from query_lineage import (
    ColumnLineage,
    CycleDetectedError,
    ErrorMode,
    LineageConfig,
    TableEntity,
    TableKind,
    UnresolvedReferenceError,
    UnsupportedQueryShapeError,
)
from query_lineage.models.table_entity import DERIVED_SUBQUERY_NAME


class TestTableEntity:
    """Tests for TableEntity."""

    def test_registry_key_prefers_alias(self):
        """Test that the alias is the key when present."""
        assert TableEntity.base_table("sales.orders", "o").registry_key == "o"
        assert TableEntity.base_table("sales.orders").registry_key == "sales.orders"

    def test_empty_alias_is_no_alias(self):
        """Test that an empty alias is dropped."""
        entity = TableEntity.base_table("orders", "")

        assert entity.exposed_alias is None
        assert entity.registry_key == "orders"

    def test_derived_subquery(self):
        """Test derived subquery entities."""
        entity = TableEntity.derived_subquery("t")

        assert entity.canonical_name == DERIVED_SUBQUERY_NAME
        assert entity.kind is TableKind.DERIVED_SUBQUERY
        assert entity.registry_key == "t"

    def test_result(self):
        """Test the sentinel entity."""
        entity = TableEntity.result("__result__")

        assert entity.is_result
        assert not TableEntity.cte("s").is_result

    def test_value_equality(self):
        """Test that entities compare by value."""
        assert TableEntity.cte("s", "x") == TableEntity("s", TableKind.CTE, "x")
        assert TableEntity.cte("s") != TableEntity.base_table("s")

    def test_immutable(self):
        """Test that entities are frozen."""
        entity = TableEntity.cte("s")

        with pytest.raises(dataclasses.FrozenInstanceError):
            entity.canonical_name = "t"

    def test_scoped_key(self):
        """Test that a scoped entity keeps its reference name."""
        entity = TableEntity.base_table("orders").scoped("orders")

        assert entity.scope == "orders"
        assert entity.reference_name == "orders"
        assert entity.registry_key == "orders::orders"
        assert entity.to_dict()["scope"] == "orders"
        assert entity != TableEntity.base_table("orders")

    def test_reference_name(self):
        assert TableEntity.base_table("sales.orders", "o").reference_name == "o"
        assert TableEntity.cte("s").reference_name == "s"
        assert TableEntity.derived_subquery("t").scoped("t").reference_name == "t"


class TestColumnLineage:
    """Tests for ColumnLineage."""

    def test_sequences_become_tuples(self):
        """Test list input."""
        lineage = ColumnLineage("total", "ctx", "a + b", ["a", "b"], ["b"])

        assert lineage.dependencies == ("a", "b")
        assert lineage.unresolved == ("b",)
        assert not lineage.is_complete

    def test_unresolved_must_be_a_dependency(self):
        """Test the subset check."""
        with pytest.raises(ValueError):
            ColumnLineage("total", "ctx", "a", ("a",), unresolved=("z",))

    def test_qualified_name(self):
        """Test context-qualified name."""
        assert ColumnLineage("id", "s", "c.id").qualified_name == "s.id"

    def test_wildcard_is_incomplete(self):
        """Test that wildcards are never complete."""
        lineage = ColumnLineage("*", "ctx", "*", is_wildcard=True)

        assert not lineage.is_complete
        assert lineage.to_dict()["is_wildcard"] is True


class TestLineageConfig:
    """Tests for LineageConfig."""

    def test_defaults(self):
        """Test default values."""
        config = LineageConfig()

        assert config.dialect is None
        assert config.result_name == "__result__"
        assert config.normalize_case is False
        assert config.on_unsupported is ErrorMode.WARN
        assert config.on_unaliased_subquery is ErrorMode.WARN
        assert config.on_unresolved is ErrorMode.WARN

    def test_strict(self):
        """Test the strict preset with overrides."""
        config = LineageConfig.strict(dialect="snowflake")

        assert config.dialect == "snowflake"
        assert config.on_unsupported is ErrorMode.FAIL
        assert config.on_unaliased_subquery is ErrorMode.FAIL
        assert config.on_unresolved is ErrorMode.FAIL

    def test_strict_override_error_mode(self):
        """Test that strict() accepts error mode overrides."""
        config = LineageConfig.strict(on_unresolved=ErrorMode.IGNORE)

        assert config.on_unresolved is ErrorMode.IGNORE
        assert config.on_unsupported is ErrorMode.FAIL

    @pytest.mark.parametrize(
        "kwargs, error",
        [
            ({"dialect": 1}, TypeError),
            ({"result_name": None}, TypeError),
            ({"result_name": "  "}, ValueError),
            ({"normalize_case": "yes"}, TypeError),
            ({"on_unsupported": "fail"}, TypeError),
            ({"on_unaliased_subquery": None}, TypeError),
            ({"on_unresolved": "warn"}, TypeError),
        ],
    )
    def test_validation(self, kwargs, error):
        """Test invalid settings."""
        with pytest.raises(error):
            LineageConfig(**kwargs)

    def test_normalize(self):
        """Test the case rule."""
        assert LineageConfig().normalize(" Orders ") == "Orders"
        assert LineageConfig(normalize_case=True).normalize("Orders") == "orders"

    def test_error_mode_values(self):
        """Test ErrorMode values."""
        assert ErrorMode.values() == ["fail", "warn", "ignore"]


class TestExceptions:
    """Tests for exception classes."""

    def test_cycle_detected_error(self):
        """Test cycle keys and message."""
        error = CycleDetectedError(["q", "p"])

        assert error.keys == frozenset({"p", "q"})
        assert error.message == "Dependency cycle detected between: p, q"

    def test_unresolved_reference_error_lists_tables(self):
        """Test the message suffix."""
        error = UnresolvedReferenceError("Reference 'id' is ambiguous", "id", ["a", "b"])

        assert error.reference == "id"
        assert "Available tables:" in error.message
        assert "  - b" in error.message

    def test_unresolved_reference_error_without_tables(self):
        """Test the plain message."""
        error = UnresolvedReferenceError("Reference 'id' has no table", "id")

        assert error.message == "Reference 'id' has no table"
        assert error.available_tables == []

    def test_unsupported_query_shape_error(self):
        """Test attributes."""
        error = UnsupportedQueryShapeError("Unsupported Union", "Union", "SELECT 1")

        assert error.shape == "Union"
        assert error.context == "SELECT 1"
        assert str(error) == "Unsupported Union"
