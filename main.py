"""
ngshift CLI Entry Point.

This module implements the command-line interface for ngshift, a tool that
inventories an Angular / AngularJS project and converts it, unit by unit, into
React code with the help of an LLM.

The pipeline operates in four distinct stages:

1.  **Scanning**: Walks the project root depth-first, skipping dependency and
    build directories, test files and type declarations.
2.  **Classifying**: Reads each recognized file once and tags it as a
    definition (component, controller, service, ...), a template or a style,
    using file-name conventions and, for plain scripts, content sniffing.
3.  **Grouping**: Pairs every component, controller and directive with its
    template and style sheet (explicit `templateUrl`/`styleUrls` references
    first, naming conventions second) and buckets every other definition.
4.  **Converting & Writing**: Sends each logical unit and bucket entry to the
    model with bounded concurrency and writes the results under the output
    root. A failing unit never stops the others.

Usage:
    $ python main.py --path /path/to/angular-app --output /path/to/react-app
    $ python main.py --path /path/to/angular-app --dry-run

Dependencies:
    - Typer: CLI argument parsing and app structure.
    - Rich: Terminal UI, colors, tables and progress visualization.
    - LiteLLM: Provider-agnostic LLM calls.
    - tiktoken: Prompt size checks.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich import print as pr

from constants import EXCLUDED_DIRS
from core.config import PipelineConfig
from core.conversion import LLMConverter
from core.exceptions import FileIOError, RootInaccessibleError
from core.file_io import OutputWriter
from core.llm import save_config
from core.models import IssueKind, ProjectInventory
from core.pipeline import PipelineOrchestrator
from ui.progress_display import RichProgressDisplay
from ui.summary import print_inventory_summary, print_run_report
from utils import debug

app = typer.Typer()


@app.command()
def main(
    path: Annotated[
        Path,
        typer.Option(
            file_okay=False,
            resolve_path=True,
            help="Root of the Angular project to convert",
        ),
    ] = Path.cwd(),
    output: Annotated[
        Path | None,
        typer.Option(
            file_okay=False,
            resolve_path=True,
            help="Directory the React files are written to. Defaults to <path>-react.",
        ),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option(help="Extra directory name to skip (repeatable)"),
    ] = None,
    model: Annotated[
        str | None, typer.Option(help="LLM model name, as understood by litellm")
    ] = None,
    api_key: Annotated[
        str | None, typer.Option(help="API key for the model provider")
    ] = None,
    concurrency: Annotated[
        int | None, typer.Option(min=1, help="Maximum simultaneous conversions")
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the inventory and stop before converting"),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Trace how every file was classified")
    ] = False,
    save: Annotated[
        bool,
        typer.Option(
            "--save-config", help="Remember --model and --api-key for later runs"
        ),
    ] = False,
):
    """
    Inventory an Angular project and convert it to React.

    Exits with code 1 if the project root cannot be read or an unexpected
    error occurs, and with code 2 if some units failed to convert or write.
    Skipped files (unreadable or broken links) do not change the exit code.
    """
    if save:
        save_model_config(model, api_key)

    output_root = output if output is not None else path.with_name(f"{path.name}-react")
    config = PipelineConfig.from_settings(
        path,
        output_root,
        model=model,
        api_key=api_key,
        max_concurrency=concurrency,
        excluded_dirs=EXCLUDED_DIRS | frozenset(exclude) if exclude else None,
    )

    orchestrator = PipelineOrchestrator(
        config,
        converter=LLMConverter(
            config.model, config.api_key, max_prompt_tokens=config.max_prompt_tokens
        ),
        writer=OutputWriter(config.output_root),
        progress_display=RichProgressDisplay(),
    )

    pr(f"\n[green]Scanning: {config.root}...[/green]")

    try:
        if dry_run:
            inventory = orchestrator.build_inventory()
            orchestrator.finish()
            if verbose:
                trace_classification(inventory)
            print_inventory_summary(inventory)
            return

        report = orchestrator.run()
    except RootInaccessibleError as e:
        print_root_err(e)
    except KeyboardInterrupt:
        orchestrator.cancel()
        pr("\n[yellow]Conversion aborted.[/yellow]")
        raise typer.Exit(code=130)
    except Exception as e:  # noqa: BLE001
        # Catch-all so users see a friendly message instead of a stack trace
        print_unexpected_err(e)

    if verbose:
        trace_classification(report.inventory)
    print_inventory_summary(report.inventory)
    print_run_report(report)
    pr(f"\n[green]Output written to: {config.output_root}[/green]")

    write_failed = any(i.kind == IssueKind.WRITE_FAILED for i in report.issues)
    if report.failed or write_failed:
        raise typer.Exit(code=2)


def save_model_config(model: str | None, api_key: str | None) -> None:
    """
    Persist the model name and API key given on the command line.

    Raises:
        typer.Exit: If either value is missing or the settings file cannot be written.
    """
    if not model or not api_key:
        pr("\n[bold][red]Error:[/bold] --model and --api-key are required with --save-config.")
        raise typer.Exit(code=1)
    try:
        saved_to = save_config(model.strip(), api_key.strip())
    except FileIOError as e:
        pr(f"[red]Error:[/red] Could not save config: {e.message}")
        raise typer.Exit(code=1) from e
    pr(f"[green]Config saved to {saved_to}.[/green]")


def trace_classification(inventory: ProjectInventory) -> None:
    for source_file in inventory.files:
        debug(
            inventory.relative(source_file.path),
            "->",
            source_file.category,
            source_file.kind or "",
            f"(declares {source_file.declared_name})" if source_file.declared_name else "",
        )


def print_root_err(e: RootInaccessibleError) -> None:
    """
    Displays a user-friendly error message when the project root cannot be read.

    Raises:
        typer.Exit: Always raises with exit code 1.
    """
    pr("❌ [bold red]Project Error[/bold red]")
    pr(f"{e.message}")
    pr("\n[yellow]Quick Fix:[/yellow] Check the --path value and its permissions.")
    pr(f"Diagnostics: {e.diagnostic_info}")
    raise typer.Exit(code=1) from e


def print_unexpected_err(e: Exception) -> None:
    """
    Displays a user-friendly error message for unexpected errors.

    Raises:
        typer.Exit: Always raises with exit code 1.
    """
    pr("❌ [bold red]Unexpected Error[/bold red]")
    pr("An unexpected error occurred while processing your request.")
    pr(f"\n[yellow]Error Type:[/yellow] {type(e).__name__}")
    pr(f"[yellow]Error Message:[/yellow] {str(e)}")

    pr("\n--- PLEASE REPORT THIS ---")
    pr(f"Error Type: {type(e).__name__}")
    pr(f"Error Message: {e}")
    if e.__cause__:
        pr(f"Caused by: {e.__cause__}")

    raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
