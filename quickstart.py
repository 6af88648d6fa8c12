#!/usr/bin/env python3
"""
Quick Start Script - Demonstrates query-lineage core features

Builds the dependency graph of a query with two CTEs and a join, then
prints the evaluation order, the producers of the result and the lineage
of every projected column.
"""

from query_lineage import analyze_sql
from query_lineage.utils.report import format_tables


def main():
    print("=" * 60)
    print("Query Lineage - Quick Start Demo")
    print("=" * 60)
    print()

    sql = """
    WITH monthly_sales AS (
        SELECT
            DATE_TRUNC('month', o.order_date) AS month,
            c.customer_id,
            o.amount + o.tax AS revenue
        FROM orders o
        JOIN customers c ON o.customer_id = c.customer_id
    ),
    top_customers AS (
        SELECT customer_id, SUM(revenue) AS total
        FROM monthly_sales
        GROUP BY customer_id
    )
    SELECT tc.total, c.name
    FROM top_customers tc
    JOIN customers c ON tc.customer_id = c.customer_id
    """

    print("Analyzing query...")
    graph = analyze_sql(sql)
    print(f"[OK] {graph!r}")
    print()

    print("Tables:")
    print(format_tables(graph))
    print()

    print("Evaluation order:")
    for step, key in enumerate(graph.topological_order(), 1):
        print(f"  {step}. {key}")
    print()

    print(f"{graph.result_name} reads:")
    for entity in graph.incoming_dependencies(graph.result_name):
        print(f"  - {entity.registry_key} ({entity.kind.value})")
    print()

    print("Column lineage:")
    for column in graph.columns:
        sources = ", ".join(column.dependencies) or "(none)"
        print(f"  {column.qualified_name} <- {sources}")
    print()

    if graph.is_complete:
        print("[OK] Every reference was attributed to a table")
    else:
        print("[WARN] Unresolved references:")
        for reference in graph.unresolved_references():
            print(f"  - {reference}")

    print()
    print("=" * 60)
    print("Demo complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
