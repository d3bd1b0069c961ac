"""
Directory walking for project scans.

Enumerates candidate files under a project root in a reproducible depth-first
order. Excluded directory names are never entered, symlinked directories are
entered at most once, and entries that cannot be inspected are recorded as
skipped instead of interrupting the scan.
"""

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Generator, Iterable

from core.exceptions import RootInaccessibleError
from core.models import IssueKind, PipelineIssue


def walk_directory(
    root: Path,
    excluded_dirs: Iterable[str],
    excluded_file_patterns: Iterable[str] = (),
    issues: list[PipelineIssue] | None = None,
) -> Generator[Path, None, None]:
    """
    Lazily yield every file under `root`, depth-first.

    The root is validated eagerly, so a missing or unreadable root fails at
    call time rather than on first iteration. Entries of each directory are
    visited in sorted name order; a subdirectory is fully walked before the
    next sibling entry is visited.

    Args:
        root: The project root to walk.
        excluded_dirs: Directory names that are never descended into.
        excluded_file_patterns: File name globs (e.g., "*.spec.ts") whose
            matches are not yielded.
        issues: Optional list collecting a FILE_READ_SKIPPED issue for every
            entry that could not be inspected.

    Returns:
        Generator[Path, None, None]: Absolute file paths.

    Raises:
        RootInaccessibleError: If the root does not exist, is not a directory,
            or cannot be listed.
    """
    root = Path(root).absolute()
    if not root.is_dir():
        raise RootInaccessibleError(
            message=f"Project root is not an accessible directory: {root}",
            root=str(root),
        )
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise RootInaccessibleError(
            message=f"Project root cannot be listed: {root}",
            root=str(root),
            original_exception=e,
        ) from e

    return _walk(
        root,
        frozenset(excluded_dirs),
        tuple(excluded_file_patterns),
        issues if issues is not None else [],
    )


def _walk(
    root: Path,
    excluded_dirs: frozenset[str],
    excluded_file_patterns: tuple[str, ...],
    issues: list[PipelineIssue],
) -> Generator[Path, None, None]:
    visited_dirs: set[str] = set()
    seen_files: set[str] = set()
    # Stack of entry iterators, one per open directory
    stack = [iter(_list_dir(root, issues, visited_dirs))]

    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        try:
            is_dir = entry.is_dir()
            is_file = not is_dir and entry.is_file()
        except OSError as e:
            _skip(issues, entry.path, f"Cannot inspect entry: {e}")
            continue

        if is_dir:
            if entry.name in excluded_dirs:
                continue
            stack.append(iter(_list_dir(Path(entry.path), issues, visited_dirs)))
        elif is_file:
            if any(fnmatchcase(entry.name, p) for p in excluded_file_patterns):
                continue
            real = os.path.realpath(entry.path)
            if real in seen_files:
                continue
            seen_files.add(real)
            yield Path(entry.path)
        elif entry.is_symlink():
            _skip(issues, entry.path, "Broken symbolic link")


def _list_dir(
    directory: Path, issues: list[PipelineIssue], visited_dirs: set[str]
) -> list[os.DirEntry]:
    real = os.path.realpath(directory)
    if real in visited_dirs:
        return []
    visited_dirs.add(real)

    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        _skip(issues, str(directory), f"Cannot list directory: {e}")
        return []


def _skip(issues: list[PipelineIssue], path: str, message: str) -> None:
    issues.append(PipelineIssue(IssueKind.FILE_READ_SKIPPED, path, message))
