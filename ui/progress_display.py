"""
Progress reporting protocol for decoupling UI from the pipeline.

The pipeline reports progress through the ProgressDisplay protocol so that
the conversion stage can run under a Rich progress bar in the terminal and
silently in tests.
"""

from enum import StrEnum
from types import TracebackType
from typing import Protocol

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
)


class ProgressState(StrEnum):
    """Rich color used for a task description in each state."""

    IN_PROGRESS = "magenta"
    COMPLETE = "green"


def create_progress() -> Progress:
    """Create a Rich Progress with a spinner, description, bar and N/M counter."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
    )


class ProgressDisplay(Protocol):
    """
    Protocol for progress reporting.

    The lifecycle is:
    1. Context manager entry (__enter__)
    2. on_start() - Called once at the beginning
    3. on_update() - Called once per processed item
    4. on_complete() - Called once at the end
    5. Context manager exit (__exit__)
    """

    def __enter__(self) -> "ProgressDisplay":
        """Enter the progress context."""

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the progress context."""

    def on_start(self, description: str, total: int | None) -> None:
        """Start a task of `total` items (None for indeterminate)."""

    def on_update(
        self, *, advance: int | None = None, description: str | None = None
    ) -> None:
        """Advance the counter, replace the description, or both."""

    def on_complete(
        self, description: str, completed: int, total: int | None = None
    ) -> None:
        """Mark the task as complete with a final description."""


class RichProgressDisplay:
    """
    Rich implementation of ProgressDisplay.

    Shows a spinner, the task description, a bar and an "N/M" counter.
    """

    def __init__(self) -> None:
        """Progress instance is created lazily on __enter__."""
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def __enter__(self) -> "RichProgressDisplay":
        self._progress = create_progress()
        self._progress.__enter__()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._progress:
            self._progress.__exit__(exc_type, exc_val, exc_tb)

    def on_start(self, description: str, total: int | None) -> None:
        """
        Create the Rich task.

        Raises:
            RuntimeError: If not used as a context manager.
        """
        progress = self._require_progress()
        self._task = progress.add_task(
            f"[{ProgressState.IN_PROGRESS}]{description}", total=total
        )

    def on_update(
        self, *, advance: int | None = None, description: str | None = None
    ) -> None:
        """
        Advance the task and/or restyle its description as in progress.

        Raises:
            RuntimeError: If on_start() was not called first.
            ValueError: If neither advance nor description is provided.
        """
        progress = self._require_progress()
        if self._task is None:
            raise RuntimeError("on_start() must be called before on_update()")
        if not (advance or description):
            raise ValueError(
                "At least one of 'advance' or 'description' must be provided to on_update()"
            )

        # Rich treats description=None as "clear", so only pass it when set
        if description:
            progress.update(
                self._task,
                advance=advance,
                description=f"[{ProgressState.IN_PROGRESS}]{description}",
            )
        else:
            progress.update(self._task, advance=advance)

    def on_complete(
        self, description: str, completed: int, total: int | None = None
    ) -> None:
        progress = self._require_progress()
        if self._task is None:
            raise RuntimeError("on_start() must be called before on_complete()")
        progress.update(
            self._task,
            total=total,
            completed=completed,
            description=f"[{ProgressState.COMPLETE}]{description}",
        )

    def _require_progress(self) -> Progress:
        if not self._progress:
            raise RuntimeError(
                "RichProgressDisplay must be used as a context manager. "
                "Use: with RichProgressDisplay() as rpd:"
            )
        return self._progress


class NoOpProgressDisplay:
    """
    No-op implementation of ProgressDisplay for testing.

    This implementation does nothing, allowing tests to run without Rich UI.
    """

    def __enter__(self) -> "NoOpProgressDisplay":
        return self

    def __exit__(self, *args) -> None:
        pass

    def on_start(self, description: str, total: int | None) -> None:
        pass

    def on_update(
        self, *, advance: int | None = None, description: str | None = None
    ) -> None:
        pass

    def on_complete(
        self, description: str, completed: int, total: int | None = None
    ) -> None:
        pass
