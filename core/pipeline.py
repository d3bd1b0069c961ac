"""
Pipeline orchestration.

The PipelineOrchestrator sequences one run as a small state machine:

    idle -> scanning -> classifying -> grouping -> converting -> writing -> done

`failed` is reachable only from `scanning`, when the project root cannot be
opened. Every later stage isolates failures per item: unreadable files are
skipped, failed conversions become tagged results, and failed writes become
issues, so a run always finishes with a (possibly partial) report.
"""

import asyncio
import threading
from enum import StrEnum
from pathlib import Path

from rich import print as pr

from core.config import PipelineConfig
from core.conversion import Converter, build_requests, dispatch_conversions
from core.exceptions import RootInaccessibleError
from core.file_io import FileReader, FileWriter
from core.inventory import load_source_files, partition
from core.models import (
    ConversionResult,
    IssueKind,
    PipelineIssue,
    PipelineReport,
    ProjectInventory,
)
from core.walker import walk_directory
from ui.progress_display import NoOpProgressDisplay, ProgressDisplay


class PipelineState(StrEnum):
    IDLE = "idle"
    SCANNING = "scanning"
    CLASSIFYING = "classifying"
    GROUPING = "grouping"
    CONVERTING = "converting"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


ALLOWED_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.SCANNING}),
    PipelineState.SCANNING: frozenset(
        {PipelineState.CLASSIFYING, PipelineState.FAILED}
    ),
    PipelineState.CLASSIFYING: frozenset({PipelineState.GROUPING}),
    PipelineState.GROUPING: frozenset({PipelineState.CONVERTING, PipelineState.DONE}),
    PipelineState.CONVERTING: frozenset({PipelineState.WRITING}),
    PipelineState.WRITING: frozenset({PipelineState.DONE}),
    PipelineState.DONE: frozenset(),
    PipelineState.FAILED: frozenset(),
}


class PipelineOrchestrator:
    """
    Runs scan, classification, grouping, conversion and writing for one project.

    An orchestrator instance handles a single run. All inputs come from the
    config and the collaborators given here; nothing is read from global state.

    Attributes:
        config: The run configuration.
        converter: Conversion collaborator.
        writer: Output persistence collaborator.
        reader: Optional reader for file contents (filesystem by default).
        progress_display: Progress reporting for the converting stage.
        state: Current pipeline state.
        inventory: The inventory, once grouping has completed.
    """

    def __init__(
        self,
        config: PipelineConfig,
        converter: Converter,
        writer: FileWriter,
        reader: FileReader | None = None,
        progress_display: ProgressDisplay | None = None,
    ):
        self.config = config
        self.converter = converter
        self.writer = writer
        self.reader = reader
        self.progress_display = (
            progress_display if progress_display is not None else NoOpProgressDisplay()
        )
        self.state = PipelineState.IDLE
        self.inventory: ProjectInventory | None = None
        self._cancel_event = threading.Event()

    def cancel(self) -> None:
        """
        Stop dispatching new conversions.

        Safe to call from any thread. In-flight conversions complete; requests
        not started yet are reported as cancelled and nothing is written for them.
        """
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def build_inventory(self) -> ProjectInventory:
        """
        Run the scanning, classifying and grouping stages only.

        Returns:
            ProjectInventory: The grouped inventory.

        Raises:
            RootInaccessibleError: If the root cannot be opened. The
                orchestrator is left in the FAILED state.
        """
        self._transition(PipelineState.SCANNING)
        scan_issues: list[PipelineIssue] = []
        try:
            paths = list(
                walk_directory(
                    self.config.root,
                    self.config.excluded_dirs,
                    self.config.excluded_file_patterns,
                    scan_issues,
                )
            )
        except RootInaccessibleError:
            self._transition(PipelineState.FAILED)
            raise

        for issue in scan_issues:
            pr(f"[yellow]⚠ Warning:[/yellow] Skipped {issue.path}: {issue.message}")

        self._transition(PipelineState.CLASSIFYING)
        pr(f"\n[bold magenta]🔍 Classifying {len(paths)} files...[/bold magenta]")
        files = load_source_files(
            paths,
            self.reader,
            self.config.heuristics,
            self.config.read_workers,
            scan_issues,
        )

        self._transition(PipelineState.GROUPING)
        root = Path(self.config.root).absolute()
        inventory = partition(root, files, self.config.grouped_kinds)
        inventory.issues.extend(scan_issues)
        self.inventory = inventory
        return inventory

    def finish(self) -> None:
        """Close a run that stops after grouping (e.g., a dry run)."""
        self._transition(PipelineState.DONE)

    def run(self) -> PipelineReport:
        """
        Run the whole pipeline synchronously.

        Returns:
            PipelineReport: Conversion results, written paths and issues.

        Raises:
            RootInaccessibleError: If the root cannot be opened.
        """
        return asyncio.run(self.run_async())

    async def run_async(self) -> PipelineReport:
        """Asynchronous variant of run(), for callers with a running loop."""
        inventory = self.build_inventory()

        self._transition(PipelineState.CONVERTING)
        requests = build_requests(inventory)
        pr(f"\n[bold magenta]⚙️  Converting {len(requests)} units...[/bold magenta]")
        results = await dispatch_conversions(
            requests,
            self.converter,
            self.config.max_concurrency,
            self._cancel_event,
            self.progress_display,
        )

        report = PipelineReport(inventory=inventory, results=results)
        report.issues.extend(inventory.issues)
        for result in results:
            if result.error is not None:
                pr(
                    f"[yellow]⚠ Warning:[/yellow] Failed to convert {result.request.source_path}: {result.error}"
                )
                report.issues.append(
                    PipelineIssue(
                        IssueKind.CONVERSION_FAILED,
                        result.request.source_path.as_posix(),
                        result.error,
                    )
                )

        self._transition(PipelineState.WRITING)
        self._write_results(results, report)

        self._transition(PipelineState.DONE)
        return report

    def _write_results(
        self, results: list[ConversionResult], report: PipelineReport
    ) -> None:
        for result in results:
            if not result.ok:
                continue
            output_path = result.request.output_path
            try:
                self.writer.write(output_path, result.content)
            except Exception as e:  # noqa: BLE001
                # Isolation boundary: a failed write never aborts the others
                message = getattr(e, "message", None) or str(e) or type(e).__name__
                pr(
                    f"[yellow]⚠ Warning:[/yellow] Failed to write {output_path}: {message}"
                )
                report.issues.append(
                    PipelineIssue(
                        IssueKind.WRITE_FAILED, output_path.as_posix(), message
                    )
                )
                continue
            report.written.append(output_path)

    def _transition(self, new_state: PipelineState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid pipeline transition: {self.state} -> {new_state}"
            )
        self.state = new_state
