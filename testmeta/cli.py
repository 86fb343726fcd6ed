"""
Command-line interface for TestMeta.
"""
import json
import logging
import sys

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from testmeta import __version__
from testmeta.engine import TestMetadataEngine
from testmeta.environment import RuntimeEnvironment
from testmeta.exceptions import TestMetadataError


logger = logging.getLogger("testmeta")
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)]
    )


def _build_engine(metadata, framework_version, framework_base, paths) -> TestMetadataEngine:
    for path in paths:
        if path not in sys.path:
            sys.path.insert(0, path)

    reader_type = "json" if metadata else "attribute"
    reader_config = {"path": metadata} if metadata else {}

    return TestMetadataEngine(
        environment=RuntimeEnvironment.detect(framework_version=framework_version),
        framework_bases=framework_base or None,
        reader_type=reader_type,
        reader_config=reader_config
    )


def engine_options(func):
    """Options shared by every command that builds an engine."""
    func = click.option('--path', '-p', 'paths', multiple=True, type=click.Path(exists=True),
                        help='Directory to put on sys.path before importing test classes')(func)
    func = click.option('--framework-base', multiple=True,
                        help='Framework base class whose methods are never hooks (repeatable)')(func)
    func = click.option('--framework-version', default=None,
                        help='Version of the test framework used for requirement checks')(func)
    func = click.option('--metadata', '-m', type=click.Path(exists=True),
                        help='JSON file with metadata facts (default: facts attached with @annotate)')(func)
    return func


@click.group()
@click.version_option(__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """TestMeta - resolve metadata of unit-test classes and methods."""
    _setup_logging(verbose)


@cli.command()
@click.argument('class_name', type=str)
@click.argument('method_name', type=str)
@engine_options
@click.option('--output', '-o', type=click.Path(), help='Write the decisions to a JSON file')
def explain(class_name, method_name, metadata, framework_version, framework_base, paths, output):
    """Show every resolved decision for CLASS_NAME::METHOD_NAME."""
    try:
        engine = _build_engine(metadata, framework_version, framework_base, paths)

        with console.status(f"Resolving metadata for {class_name}::{method_name}...", spinner="dots"):
            decisions = engine.describe(class_name, method_name)

        table = Table(title=f"Decisions for {decisions['test']}")
        table.add_column("Decision", style="cyan")
        table.add_column("Value", style="green")

        for key, value in decisions.items():
            if key == "test":
                continue
            table.add_row(key, json.dumps(value) if isinstance(value, (dict, list)) else str(value))

        console.print(table)

        if decisions["missing_requirements"]:
            console.print("[yellow]The test would be skipped because of missing requirements.[/yellow]")

        if output:
            with open(output, 'w') as f:
                json.dump(decisions, f, indent=2)
            console.print(f"[green]Decisions exported to {output}[/green]")

    except (TestMetadataError, ValidationError) as e:
        console.print(f"[red]Error resolving metadata: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument('class_name', type=str)
@engine_options
def hooks(class_name, metadata, framework_version, framework_base, paths):
    """Show the hook methods of CLASS_NAME in execution order."""
    try:
        engine = _build_engine(metadata, framework_version, framework_base, paths)
        table_data = engine.hook_methods(class_name)

        table = Table(title=f"Hook methods of {class_name}")
        table.add_column("Hook", style="cyan")
        table.add_column("Methods", style="green")

        for hook, methods in table_data.as_dict().items():
            table.add_row(hook, ", ".join(methods))

        console.print(table)

    except (TestMetadataError, ValidationError) as e:
        console.print(f"[red]Error resolving hook methods: {e}[/red]")
        sys.exit(1)


def main():
    cli(auto_envvar_prefix="TESTMETA")


if __name__ == '__main__':
    main()
