"""
Command-line interface for query-lineage.

This module analyzes a SQL file and prints its table dependency graph,
evaluation order and column lineage.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from colorama import Fore, Style, init

from query_lineage import DependencyGraph, LineageConfig, analyze_sql
from query_lineage.exceptions import CycleDetectedError, LineageError
from query_lineage.graph.algorithms import cycle_members
from query_lineage.utils.report import REPORT_FORMATS, format_report

USE_COLOR = True


def _colored(msg: str, color: str) -> str:
    if USE_COLOR:
        return f"{color}{msg}{Style.RESET_ALL}"
    return msg


def print_success(msg: str) -> None:
    """Print success message."""
    print(_colored(f"[OK] {msg}", Fore.GREEN))


def print_error(msg: str) -> None:
    """Print error message."""
    print(_colored(f"[ERROR] {msg}", Fore.RED), file=sys.stderr)


def print_warning(msg: str) -> None:
    """Print warning message."""
    print(_colored(f"[WARN] {msg}", Fore.YELLOW))


def print_info(msg: str) -> None:
    """Print info message."""
    print(_colored(msg, Fore.CYAN))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="query-lineage",
        description="Table and column dependency graph of a SQL query",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Evaluation order and column lineage
  %(prog)s query.sql

  # Snowflake dialect, tabulated output
  %(prog)s query.sql --dialect snowflake --format table

  # Direct producers of a table
  %(prog)s query.sql --depends-on monthly_sales

  # Export the graph as JSON
  %(prog)s query.sql --export graph.json
        """,
    )

    input_group = parser.add_argument_group("Input Options")
    input_group.add_argument("sql_file", help="SQL file to analyze")
    input_group.add_argument(
        "--dialect", "-d", help="sqlglot dialect (e.g. snowflake, postgres)"
    )

    query_group = parser.add_argument_group("Query Options")
    query_group.add_argument(
        "--depends-on",
        metavar="KEY",
        help="List the direct producers of a table key",
    )

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--format",
        "-f",
        choices=REPORT_FORMATS,
        default="pretty",
        help="Output format (default: pretty)",
    )
    output_group.add_argument(
        "--export", "-o", metavar="FILE", help="Write the graph to FILE as JSON"
    )
    output_group.add_argument(
        "--no-color", action="store_true", help="Disable colored output"
    )

    config_group = parser.add_argument_group("Configuration")
    config_group.add_argument(
        "--strict",
        action="store_true",
        help="Fail on unsupported shapes, unaliased subqueries and unresolved references",
    )
    config_group.add_argument(
        "--normalize-case",
        action="store_true",
        help="Lower-case table names and aliases",
    )
    config_group.add_argument(
        "--no-warnings", action="store_true", help="Suppress diagnostics"
    )
    config_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    CLI main entry point.

    Exits with status 1 on missing input, parse errors, strict-mode failures
    and dependency cycles.
    """
    global USE_COLOR

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.no_color:
        USE_COLOR = False
    else:
        init(autoreset=True)

    sql_file = Path(args.sql_file)
    if not sql_file.exists():
        print_error(f"File not found: {args.sql_file}")
        sys.exit(1)

    if args.strict:
        config = LineageConfig.strict(
            dialect=args.dialect, normalize_case=args.normalize_case
        )
    else:
        config = LineageConfig(
            dialect=args.dialect, normalize_case=args.normalize_case
        )

    try:
        graph = analyze_sql(sql_file.read_text(encoding="utf-8"), config)
        print_success(
            f"Analysis complete! Found {len(graph)} tables and "
            f"{len(graph.columns)} columns."
        )

        if args.depends_on:
            handle_depends_on(graph, args.depends_on)
        else:
            print(format_report(graph, args.format))

        if args.export:
            handle_export(graph, args.export)

        if not args.no_warnings:
            show_diagnostics(graph)

        if graph.has_cycle():
            raise CycleDetectedError(cycle_members(graph))

    except CycleDetectedError as e:
        print_error(e.message)
        sys.exit(1)
    except LineageError as e:
        print_error(f"Lineage analysis failed: {e.message}")
        sys.exit(1)


def handle_depends_on(graph: DependencyGraph, key: str) -> None:
    """Handle --depends-on command."""
    if key not in graph:
        print_error(f"Unknown table key: {key}")
        sys.exit(1)

    producers = graph.incoming_dependencies(key)
    if not producers:
        print_warning(f"{key} has no dependencies")
        return

    print_info(f"{key} depends on:")
    for entity in producers:
        print(f"  - {entity.registry_key} ({entity.kind.value}: {entity.canonical_name})")


def handle_export(graph: DependencyGraph, output_file: str) -> None:
    """Write the graph as JSON."""
    output_path = Path(output_file)
    output_path.write_text(graph.to_json(indent=2), encoding="utf-8")
    print_success(f"Exported to {output_path}")


def show_diagnostics(graph: DependencyGraph) -> None:
    """Show diagnostics collected during construction."""
    diagnostics = [d for d in graph.diagnostics if d.level != "INFO"]
    if diagnostics:
        print_warning(f"{len(diagnostics)} warning(s):")
        for i, diagnostic in enumerate(diagnostics, 1):
            print(f"  {i}. [{diagnostic.code.value}] {diagnostic.message}")


if __name__ == "__main__":
    main()
