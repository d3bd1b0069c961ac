"""
Rich tables summarizing an inventory and a conversion run.
"""

from rich.console import Console
from rich.table import Table

from core.models import PipelineReport, ProjectInventory
from models import DefinitionKind
from utils import console as default_console


def inventory_table(inventory: ProjectInventory) -> Table:
    """Build a table listing every logical unit and bucket entry."""
    table = Table(title=f"Inventory of {inventory.root}")
    table.add_column("Kind", style="magenta")
    table.add_column("Name", style="bold")
    table.add_column("Definition")
    table.add_column("Template", style="green")
    table.add_column("Style", style="cyan")

    for unit in inventory.units:
        table.add_row(
            str(unit.kind),
            unit.name,
            str(inventory.relative(unit.primary.path)),
            str(inventory.relative(unit.template.path)) if unit.template else "-",
            str(inventory.relative(unit.style.path)) if unit.style else "-",
        )
    for kind in DefinitionKind:
        for source_file in inventory.bucket(kind):
            table.add_row(
                str(kind),
                source_file.declared_name or source_file.base_name,
                str(inventory.relative(source_file.path)),
                "",
                "",
            )
    return table


def print_inventory_summary(
    inventory: ProjectInventory, console: Console | None = None
) -> None:
    console = console if console is not None else default_console
    console.print(inventory_table(inventory))

    bucketed = sum(len(files) for files in inventory.buckets.values())
    console.print(
        f"[green]{len(inventory.units)} logical units, {bucketed} bucket entries, "
        f"{len(inventory.unclaimed)} unclaimed templates/styles, "
        f"{len(inventory.issues)} skipped entries.[/green]"
    )


def print_run_report(report: PipelineReport, console: Console | None = None) -> None:
    """Print converted/failed counts and list every failed item."""
    console = console if console is not None else default_console
    console.print(
        f"\n[bold green]✅ Converted {report.converted_count} of {len(report.results)} units, "
        f"wrote {len(report.written)} files.[/bold green]"
    )
    if not report.issues:
        return

    table = Table(title="Issues")
    table.add_column("Kind", style="yellow")
    table.add_column("Path")
    table.add_column("Details")
    for issue in report.issues:
        table.add_row(str(issue.kind), issue.path, issue.message)
    console.print(table)
