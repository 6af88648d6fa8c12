"""
Report rendering for dependency graphs.

Presentation layer over a DependencyGraph: a plain evaluation-order dump, a
tabulated view of tables and columns, and JSON.
"""

from __future__ import annotations

import json
from typing import Optional

from tabulate import tabulate

from query_lineage.exceptions import CycleDetectedError
from query_lineage.graph.dependency_graph import DependencyGraph

REPORT_FORMATS = ("pretty", "table", "json")


def format_evaluation_order(graph: DependencyGraph) -> str:
    """One line per table in evaluation order: ``key <- [producers]``.

    Raises:
        CycleDetectedError: If the graph has no evaluation order.
    """
    lines = []
    for key in graph.topological_order():
        producers = [entity.registry_key for entity in graph.incoming_dependencies(key)]
        if producers:
            lines.append(f"{key} <- [{', '.join(producers)}]")
        else:
            lines.append(key)
    return "\n".join(lines)


def format_tables(graph: DependencyGraph, tablefmt: str = "simple") -> str:
    rows = [
        (
            entity.registry_key,
            entity.kind.value,
            entity.canonical_name,
            entity.exposed_alias or "",
        )
        for entity in graph
    ]
    return tabulate(rows, headers=["key", "kind", "name", "alias"], tablefmt=tablefmt)


def format_columns(graph: DependencyGraph, tablefmt: str = "simple") -> str:
    rows = []
    for column in graph.columns:
        dependencies = ", ".join(
            f"{dep}?" if dep in column.unresolved else dep
            for dep in column.dependencies
        )
        rows.append((column.context, column.output_name, dependencies))
    return tabulate(rows, headers=["context", "column", "depends on"], tablefmt=tablefmt)


def format_edges(graph: DependencyGraph, tablefmt: str = "simple") -> str:
    return tabulate(graph.edges, headers=["producer", "consumer"], tablefmt=tablefmt)


def format_report(
    graph: DependencyGraph, fmt: str = "pretty", indent: Optional[int] = 2
) -> str:
    """Render the whole graph.

    Args:
        graph: DependencyGraph to render.
        fmt: "pretty" (evaluation order followed by column lineage),
            "table" (tables, columns and edges as grids) or "json".
        indent: JSON indentation.

    Returns:
        Report text.

    Raises:
        ValueError: If ``fmt`` is unknown.
    """
    if fmt == "json":
        return json.dumps(graph.to_dict(), indent=indent, ensure_ascii=False)

    if fmt == "table":
        return "\n\n".join(
            [
                "Tables\n" + format_tables(graph),
                "Columns\n" + format_columns(graph),
                "Edges\n" + format_edges(graph),
            ]
        )

    if fmt == "pretty":
        try:
            order = format_evaluation_order(graph)
        except CycleDetectedError as e:
            order = f"(no evaluation order: {e.message})"
        sections = ["Evaluation order:", order, "", "Columns:"]
        for column in graph.columns:
            sources = ", ".join(column.dependencies) or "-"
            sections.append(f"  {column.qualified_name} <- {sources}")
        return "\n".join(sections)

    raise ValueError(f"Unknown report format '{fmt}'. Expected one of {REPORT_FORMATS}")
