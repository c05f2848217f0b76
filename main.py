#!/usr/bin/env python3
"""
Architecture Explorer - Command Line Entry Point

Builds containment and usage graphs (DGML or JSON) from a compiled assembly's
metadata dump, or table/column diagrams from a database catalog dump.

Usage:
    python main.py assembly MyApp.json
    python main.py assembly MyApp.json --type MyApp.Orders.OrderService --format json
    python main.py database catalog.json --output diagrams/
"""

import argparse
import sys
from pathlib import Path

from arch_explorer.config import settings
from arch_explorer.errors import ArchExplorerError
from arch_explorer.handler import (
    create_database_graph,
    create_method_call_graph_of_assembly,
    create_method_call_graph_of_type,
    load_settings,
)
from arch_explorer.utils.logger import app_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Architecture Explorer - assembly and database graphs")
    parser.add_argument("--config", default=settings.config_file, help="JSON config file")
    parser.add_argument("--format", choices=["dgml", "json"], default=None, help="Output format")
    parser.add_argument("--output", default=None, help="Output file or directory")

    subparsers = parser.add_subparsers(dest="command", required=True)

    assembly_parser = subparsers.add_parser("assembly", help="Graph of an assembly metadata dump")
    assembly_parser.add_argument("path", help="Assembly metadata JSON file")
    assembly_parser.add_argument("--type", dest="type_name", default=None,
                                 help="Full name of a single type to analyze")
    assembly_parser.add_argument("--namespace-contains", nargs="*", default=None,
                                 help="Only export namespaces containing one of these strings")
    assembly_parser.add_argument("--hierarchy-only", action="store_true",
                                 help="With --type, only follow references into the type's base types")

    database_parser = subparsers.add_parser("database", help="Graph of a database catalog dump")
    database_parser.add_argument("path", help="Catalog JSON file")

    return parser


def output_file(args, run_settings, default_stem: str) -> Path:
    extension = f".{run_settings.output_format}"
    if args.output:
        target = Path(args.output)
        if target.suffix:
            return target
        return target / f"{default_stem}{extension}"
    return run_settings.output_path / f"{default_stem}{extension}"


def main():
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    try:
        run_settings = load_settings(args.config)
    except ArchExplorerError as e:
        app_logger.error(str(e))
        sys.exit(2)

    updates = {}
    if args.format:
        updates["output_format"] = args.format
    if getattr(args, "namespace_contains", None):
        updates["export_only_namespace_name_contains"] = args.namespace_contains
    if getattr(args, "hierarchy_only", False):
        updates["type_graph_hierarchy_only"] = True
    run_settings = run_settings.model_copy(update=updates)

    if args.command == "assembly":
        if args.type_name:
            result = create_method_call_graph_of_type(args.path, args.type_name, run_settings)
            stem = args.type_name
        else:
            result = create_method_call_graph_of_assembly(args.path, run_settings)
            stem = Path(args.path).stem
    else:
        result = create_database_graph(args.path, run_settings)
        stem = Path(args.path).stem

    if not result.success:
        app_logger.error(str(result.error))
        sys.exit(1)

    target = output_file(args, run_settings, stem)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(result.content, encoding="utf-8")
    app_logger.info(f"Wrote {len(result.graph)} links to {target}")


if __name__ == "__main__":
    main()
