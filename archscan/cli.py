"""Command-line interface for ArchScan."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Dict, List, Type

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from archscan.core.config import config
from archscan.core.error_handling import ArchScanError
from archscan.finder import (
    AnnotationComponentFinderStrategy,
    ComponentFinder,
    ComponentPackageSupportingTypesStrategy,
    FirstImplementationOfInterfaceSupportingTypesStrategy,
    NameSuffixTypeMatcher,
    ReferencedTypesSupportingTypesStrategy,
    SupportingTypesStrategy,
    TypeBasedComponentFinderStrategy,
)
from archscan.models.architecture import Container, SoftwareSystem
from archscan.repository import PythonSourceTypeRepository

SUPPORTING_STRATEGIES: Dict[str, Type[SupportingTypesStrategy]] = {
    "first-implementation": FirstImplementationOfInterfaceSupportingTypesStrategy,
    "package": ComponentPackageSupportingTypesStrategy,
    "referenced": ReferencedTypesSupportingTypesStrategy,
}


def _supporting_strategies(names: List[str]) -> List[SupportingTypesStrategy]:
    return [SUPPORTING_STRATEGIES[name]() for name in names or []]


def _scan(args: argparse.Namespace) -> Container:
    """Run the finders requested on the command line and return the populated container."""
    if args.marker:
        config.set("discovery", "marker", args.marker)
    repository = PythonSourceTypeRepository(args.root)
    system = SoftwareSystem(name=args.system)
    container = system.add_container(args.container)

    if args.suffix:
        # one finder per suffix, in the order given
        for suffix in args.suffix:
            strategy = TypeBasedComponentFinderStrategy(
                NameSuffixTypeMatcher(suffix),
                supporting_types_strategies=_supporting_strategies(args.supporting),
            )
            finder = ComponentFinder(container, args.scope, strategy, repository)
            finder.exclude(*(args.exclude or []))
            finder.find_components()
    else:
        strategy = AnnotationComponentFinderStrategy(*_supporting_strategies(args.supporting))
        finder = ComponentFinder(container, args.scope, strategy, repository)
        finder.exclude(*(args.exclude or []))
        finder.find_components()
    return container


def _print_container(container: Container, console: Console) -> None:
    components = Table(title=f"Components of {container.name}")
    components.add_column("Component", style="bold")
    components.add_column("Type")
    components.add_column("Supporting types")
    components.add_column("Description")
    for component in container.components:
        supporting = "\n".join(element.type for element in component.supporting_elements)
        components.add_row(component.name, component.type, supporting, component.description)
    console.print(components)

    relationships = Table(title="Relationships")
    relationships.add_column("Source", style="bold")
    relationships.add_column("Destination")
    for relationship in container.relationships:
        source = container.get_component_of_type(relationship.source)
        destination = container.get_component_of_type(relationship.destination)
        relationships.add_row(source.name, destination.name)
    console.print(relationships)


def main() -> None:
    """Entry point for the ``archscan`` command."""

    console = Console()
    parser = argparse.ArgumentParser(description="ArchScan component discovery")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Reduce logs to errors only")
    sub = parser.add_subparsers(dest="command")

    scan_p = sub.add_parser("scan", help="Discover components under a source root")
    scan_p.add_argument("root", help="Source root (the directory that would be on sys.path)")
    scan_p.add_argument("--scope", default="", help="Dotted package to scan, e.g. myapp.web")
    scan_p.add_argument(
        "--suffix",
        action="append",
        help="Find components by class name suffix; repeat to run several finders in order",
    )
    scan_p.add_argument("--marker", help="Class decorator marking components (default: component)")
    scan_p.add_argument(
        "--supporting",
        action="append",
        choices=sorted(SUPPORTING_STRATEGIES),
        help="Supporting types strategy; repeat to combine",
    )
    scan_p.add_argument("--exclude", action="append", help="Regular expression of fully-qualified types to skip")
    scan_p.add_argument("--raw-json", action="store_true", help="Output raw JSON")
    scan_p.add_argument("--system", default="Software System", help="Software system name")
    scan_p.add_argument("--container", default="Container", help="Container name")

    args = parser.parse_args()
    # Determine logging level
    if getattr(args, "debug", False):
        log_level = logging.DEBUG
    elif getattr(args, "quiet", False):
        log_level = logging.ERROR
    elif getattr(args, "verbose", False):
        log_level = logging.INFO
    else:
        log_level = getattr(logging, str(config.get("logging", "level", "WARNING")).upper(), logging.WARNING)
    logging.basicConfig(level=log_level, filename=config.get("logging", "file"))

    if args.command == "scan":
        if not os.path.isdir(args.root):
            console.print(f"[bold red]Source root not found:[/bold red] {args.root}")
            sys.exit(1)
        try:
            container = _scan(args)
        except ArchScanError as e:
            console.print(f"[bold red]Scan failed:[/bold red] {escape(str(e))}")
            sys.exit(1)
        if args.raw_json:
            print(json.dumps(container.model_dump(mode="json"), indent=2))
        else:
            _print_container(container, console)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
