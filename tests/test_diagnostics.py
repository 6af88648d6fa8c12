"""
Tests for diagnostic collection.

This module contains tests for Diagnostic and DiagnosticCollector, including
how each ErrorMode is applied.
"""

import logging

import pytest

from query_lineage import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticCollector,
    ErrorMode,
    LineageError,
    UnsupportedQueryShapeError,
)


def unsupported():
    return UnsupportedQueryShapeError("Unsupported Union", shape="Union")


class TestDiagnostic:
    """Tests for Diagnostic."""

    def test_invalid_level(self):
        """Test level validation."""
        with pytest.raises(ValueError):
            Diagnostic("DEBUG", DiagnosticCode.KEY_OVERWRITTEN, "x")

    def test_to_dict(self):
        """Test serialization."""
        diagnostic = Diagnostic(
            "WARNING", DiagnosticCode.UNRESOLVED_REFERENCE, "id", context="s.id"
        )

        assert diagnostic.to_dict() == {
            "level": "WARNING",
            "code": "unresolved_reference",
            "message": "id",
            "context": "s.id",
        }


class TestDiagnosticCollector:
    """Tests for DiagnosticCollector."""

    def test_add_and_query(self):
        """Test adding diagnostics and filtering them."""
        collector = DiagnosticCollector()
        collector.add("INFO", DiagnosticCode.KEY_OVERWRITTEN, "t redefined")
        collector.add("WARNING", DiagnosticCode.UNRESOLVED_REFERENCE, "id")
        collector.add("ERROR", DiagnosticCode.UNSUPPORTED_QUERY_SHAPE, "union")

        assert len(collector) == 3
        assert collector.has_errors()
        assert [d.message for d in collector.get_by_level("WARNING")] == ["id"]
        assert len(collector.get_by_code(DiagnosticCode.KEY_OVERWRITTEN)) == 1
        assert collector.get_summary() == {"INFO": 1, "WARNING": 1, "ERROR": 1}

    def test_clear(self):
        """Test clearing."""
        collector = DiagnosticCollector()
        collector.add("INFO", DiagnosticCode.KEY_OVERWRITTEN, "t")
        collector.clear()

        assert len(collector) == 0
        assert not collector.has_errors()

    def test_get_all_returns_copy(self):
        """Test that callers cannot mutate the collector through get_all."""
        collector = DiagnosticCollector()
        collector.add("INFO", DiagnosticCode.KEY_OVERWRITTEN, "t")
        collector.get_all().clear()

        assert len(collector) == 1

    def test_diagnostics_is_a_tuple(self):
        collector = DiagnosticCollector()
        collector.add("INFO", DiagnosticCode.KEY_OVERWRITTEN, "t")

        assert collector.diagnostics == (collector.get_all()[0],)
        with pytest.raises(AttributeError):
            collector.diagnostics.append(None)

    def test_freeze(self):
        """Test that a frozen collector rejects changes but can be read."""
        collector = DiagnosticCollector()
        collector.add("INFO", DiagnosticCode.KEY_OVERWRITTEN, "t")
        collector.freeze()

        assert collector.frozen
        with pytest.raises(LineageError):
            collector.add("INFO", DiagnosticCode.KEY_OVERWRITTEN, "u")
        with pytest.raises(LineageError):
            collector.clear()
        with pytest.raises(LineageError):
            collector.report(
                unsupported(), DiagnosticCode.UNSUPPORTED_QUERY_SHAPE, ErrorMode.WARN
            )
        assert [d.message for d in collector] == ["t"]

    def test_report_fail_raises(self):
        """Test FAIL mode."""
        collector = DiagnosticCollector()

        with pytest.raises(UnsupportedQueryShapeError):
            collector.report(
                unsupported(), DiagnosticCode.UNSUPPORTED_QUERY_SHAPE, ErrorMode.FAIL
            )
        assert len(collector) == 0

    def test_report_warn_records_and_logs(self, caplog):
        """Test WARN mode."""
        collector = DiagnosticCollector()

        with caplog.at_level(logging.WARNING, logger="query_lineage"):
            collector.report(
                unsupported(),
                DiagnosticCode.UNSUPPORTED_QUERY_SHAPE,
                ErrorMode.WARN,
                context="SELECT 1 UNION SELECT 2",
            )

        (diagnostic,) = collector.get_all()
        assert diagnostic.level == "WARNING"
        assert diagnostic.message == "Unsupported Union"
        assert diagnostic.context == "SELECT 1 UNION SELECT 2"
        assert "Unsupported Union" in caplog.text

    def test_report_ignore(self):
        """Test IGNORE mode."""
        collector = DiagnosticCollector()
        collector.report(
            unsupported(), DiagnosticCode.UNSUPPORTED_QUERY_SHAPE, ErrorMode.IGNORE
        )

        assert len(collector) == 0
