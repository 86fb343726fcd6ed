#!/usr/bin/env python3
"""
Example script demonstrating how to use TestMeta to resolve the metadata of a test.
"""
import sys
import logging
from pathlib import Path
from rich.console import Console
from rich.table import Table

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from testmeta import TestMetadataEngine
from testmeta.core import (
    After,
    BeforeClass,
    CoversClass,
    CoversFunction,
    Depends,
    Group,
    Requires,
    RequirementOperand
)
from testmeta.environment import RuntimeEnvironment
from testmeta.exceptions import TestMetadataError
from testmeta.metadata import annotate


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
console = Console()


class Invoice:
    def __init__(self, lines):
        self.lines = lines

    def total(self):
        return round_half_up(sum(self.lines))


def round_half_up(value):
    return int(value + 0.5)


@annotate(Group(group_name="billing"), CoversClass(class_name=f"{__name__}.Invoice"))
class InvoiceCase:
    @annotate(BeforeClass())
    @classmethod
    def load_fixtures(cls):
        pass

    @annotate(After())
    def rollback(self):
        pass

    def test_empty(self):
        pass

    @annotate(
        Group(group_name="small"),
        Depends(target="test_empty"),
        CoversFunction(function_name=f"{__name__}.round_half_up"),
        Requires(operand=RequirementOperand.PYTHON, value="3.9"),
        Requires(operand=RequirementOperand.EXTENSION, name="not_installed_extension")
    )
    def test_total(self):
        pass


def main():
    """Main function for the example."""
    engine = TestMetadataEngine(environment=RuntimeEnvironment.detect())
    class_name = f"{__name__}.InvoiceCase"

    try:
        missing = engine.missing_requirements(class_name, "test_total")
        lines = engine.lines_to_be_covered(class_name, "test_total")
    except TestMetadataError as e:
        console.print(f"[red]Error resolving metadata: {e}[/red]")
        return 1

    decision_table = Table(title=f"Decisions for {class_name}::test_total")
    decision_table.add_column("Decision", style="cyan")
    decision_table.add_column("Value", style="green")

    decision_table.add_row("Groups", ", ".join(engine.groups(class_name, "test_total")))
    decision_table.add_row("Size", engine.size(class_name, "test_total").value)
    decision_table.add_row(
        "Depends on",
        ", ".join(str(dependency) for dependency in engine.dependencies(class_name, "test_total"))
    )
    decision_table.add_row("Missing requirements", "\n".join(missing) or "-")

    console.print(decision_table)

    # Covered source lines
    line_table = Table(title="Lines to be covered")
    line_table.add_column("File", style="cyan")
    line_table.add_column("Ranges", style="green")

    for file, ranges in (lines or {}).items():
        line_table.add_row(file, ", ".join(f"{start}-{end}" for start, end in ranges))

    console.print(line_table)

    # Hook methods
    hooks = engine.hook_methods(class_name)
    for hook, methods in hooks.as_dict().items():
        console.print(f"[cyan]{hook}:[/cyan] {', '.join(methods)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
