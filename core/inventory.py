"""
Inventory building and partitioning.

Turns the walker's path stream into a ProjectInventory: contents are loaded
with bounded parallelism, each file is classified and named by a pure
per-file step, then the partitioner groups component-like definitions with
their templates and styles and buckets every other definition by subkind.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from rich import print as pr

from constants import DEFAULT_HEURISTICS, DEFAULT_READ_WORKERS, GROUPED_KINDS
from core.association import AssociationResolver
from core.classification import classify, is_recognized
from core.exceptions import FileReadError
from core.file_io import FileReader, FilesystemFileReader
from core.models import (
    IssueKind,
    LogicalUnit,
    PipelineIssue,
    ProjectInventory,
    SourceFile,
)
from core.names import extract_declared_name, strip_definition_suffix
from models import Category, ClassificationHeuristics, DefinitionKind


def load_source_file(
    path: Path,
    reader: FileReader,
    heuristics: ClassificationHeuristics = DEFAULT_HEURISTICS,
) -> SourceFile | None:
    """
    Read, classify and name a single file.

    Args:
        path: The file to load.
        reader: Reader used to load the content.
        heuristics: Classification rule tables.

    Returns:
        The SourceFile, or None if the extension is not recognized (the file
        is then never read).

    Raises:
        FileReadError: If the content cannot be read.
    """
    if not is_recognized(path, heuristics):
        return None

    content = reader.read_file(path)
    classification = classify(path, content, heuristics)
    if classification is None:
        return None

    declared_name = (
        extract_declared_name(content, classification.kind)
        if classification.category == Category.DEFINITION
        else None
    )
    return SourceFile(
        path=path,
        extension=path.suffix.lower(),
        content=content,
        category=classification.category,
        kind=classification.kind,
        declared_name=declared_name,
        base_name=strip_definition_suffix(path.stem, heuristics),
    )


def load_source_files(
    paths: Iterable[Path],
    reader: FileReader | None = None,
    heuristics: ClassificationHeuristics = DEFAULT_HEURISTICS,
    read_workers: int = DEFAULT_READ_WORKERS,
    issues: list[PipelineIssue] | None = None,
) -> list[SourceFile]:
    """
    Load every recognized file, keeping the input order.

    Reads run on a thread pool of `read_workers` threads. Unreadable files are
    dropped and recorded as FILE_READ_SKIPPED issues.

    Returns:
        The classified files, in the same order as `paths`.
    """
    reader = reader if reader is not None else FilesystemFileReader()
    issues = issues if issues is not None else []

    def _load(path: Path) -> SourceFile | PipelineIssue | None:
        try:
            return load_source_file(path, reader, heuristics)
        except FileReadError as e:
            return PipelineIssue(IssueKind.FILE_READ_SKIPPED, str(path), e.message)

    with ThreadPoolExecutor(max_workers=max(1, read_workers)) as executor:
        loaded = list(executor.map(_load, paths))

    files: list[SourceFile] = []
    for item in loaded:
        if isinstance(item, PipelineIssue):
            pr(f"[yellow]⚠ Warning:[/yellow] Skipped {item.path}: {item.message}")
            issues.append(item)
        elif item is not None:
            files.append(item)
    return files


def partition(
    root: Path,
    files: list[SourceFile],
    grouped_kinds: frozenset[DefinitionKind] = GROUPED_KINDS,
) -> ProjectInventory:
    """
    Split classified files into logical units and buckets.

    Component-like definitions (see GROUPED_KINDS) are resolved against the
    templates and styles in traversal order and become logical units; every
    other definition is appended to the bucket of its subkind. Templates and
    styles nobody claims stay in `inventory.files` only.

    Args:
        root: The project root.
        files: Classified files, in traversal order.
        grouped_kinds: Subkinds that form logical units.

    Returns:
        ProjectInventory: The assembled inventory.
    """
    resolver = AssociationResolver(
        templates=(f for f in files if f.category == Category.TEMPLATE),
        styles=(f for f in files if f.category == Category.STYLE),
    )

    units: list[LogicalUnit] = []
    buckets: dict[DefinitionKind, list[SourceFile]] = {}

    for source_file in files:
        if not source_file.is_definition:
            continue
        kind = source_file.kind or DefinitionKind.OTHER
        if kind in grouped_kinds:
            units.append(resolver.resolve(source_file))
        else:
            buckets.setdefault(kind, []).append(source_file)

    return ProjectInventory(root=root, files=list(files), units=units, buckets=buckets)
