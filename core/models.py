"""
Core data models for the scan, grouping and conversion pipeline.

This module defines the records produced by each stage: scanned source files,
logical units and buckets assembled into a project inventory, conversion
requests and their tagged results, and the issues recorded when an individual
item is skipped or fails.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from models import Category, DefinitionKind


class IssueKind(StrEnum):
    """Non-fatal problems recorded during a run. None of them aborts it."""

    FILE_READ_SKIPPED = "file_read_skipped"
    CONVERSION_FAILED = "conversion_failed"
    WRITE_FAILED = "write_failed"


@dataclass(frozen=True)
class PipelineIssue:
    """
    A single skipped or failed item.

    Attributes:
        kind: What went wrong (see IssueKind).
        path: The file (or output path) the issue is about.
        message: Human-readable details.
    """

    kind: IssueKind
    path: str
    message: str


@dataclass(frozen=True)
class SourceFile:
    """
    One scanned and classified file.

    Created once during the classifying stage and never mutated afterwards.
    Its content is read exactly once and shared by every later stage.

    Attributes:
        path: Absolute path to the file.
        extension: Lowercase file extension (e.g., ".ts").
        content: Raw text content.
        category: Structural role of the file.
        kind: Definition subkind. None unless category is DEFINITION.
        declared_name: Name declared in the content (e.g., the identifier
            passed to `.controller('barCtrl', ...)`), if any.
        base_name: File stem with the definition suffix stripped
            (e.g., "foo" for "foo.component.ts").
    """

    path: Path
    extension: str
    content: str
    category: Category
    kind: DefinitionKind | None = None
    declared_name: str | None = None
    base_name: str = ""

    @property
    def is_definition(self) -> bool:
        return self.category == Category.DEFINITION


@dataclass(frozen=True)
class LogicalUnit:
    """
    A definition file grouped with at most one template and one style sheet.

    Attributes:
        primary: The component, controller or directive definition.
        template: The associated template file, if one was resolved.
        style: The associated style sheet, if one was resolved.
        name: Display name (declared name, else the suffix-stripped base name).
    """

    primary: SourceFile
    name: str
    template: SourceFile | None = None
    style: SourceFile | None = None

    @property
    def kind(self) -> DefinitionKind:
        return self.primary.kind or DefinitionKind.OTHER

    def files(self) -> list[SourceFile]:
        """Return every file of the unit, primary first."""
        return [f for f in (self.primary, self.template, self.style) if f]


@dataclass
class ProjectInventory:
    """
    Root aggregate of one pipeline run.

    Built once by the partitioner and treated as read-only afterwards.

    Attributes:
        root: The scanned project root.
        files: Every classified file, in traversal order.
        units: Logical units, in traversal order of their primary file.
        buckets: Ungrouped definition files keyed by subkind, each list kept
            in traversal order.
        issues: Files skipped while building the inventory.
    """

    root: Path
    files: list[SourceFile] = field(default_factory=list)
    units: list[LogicalUnit] = field(default_factory=list)
    buckets: dict[DefinitionKind, list[SourceFile]] = field(default_factory=dict)
    issues: list[PipelineIssue] = field(default_factory=list)

    def bucket(self, kind: DefinitionKind) -> list[SourceFile]:
        return self.buckets.get(kind, [])

    def claimed_paths(self) -> set[Path]:
        """Paths of every file sitting in a logical unit slot."""
        return {f.path for unit in self.units for f in unit.files()}

    @property
    def unclaimed(self) -> list[SourceFile]:
        """Templates and styles that no logical unit claimed."""
        claimed = self.claimed_paths()
        return [
            f
            for f in self.files
            if f.category in (Category.TEMPLATE, Category.STYLE)
            and f.path not in claimed
        ]

    @property
    def unclassified(self) -> list[SourceFile]:
        return [f for f in self.files if f.category == Category.UNCLASSIFIED]

    def relative(self, path: Path) -> Path:
        """Return `path` relative to the inventory root when possible."""
        try:
            return path.relative_to(self.root)
        except ValueError:
            return Path(path.name)


@dataclass(frozen=True)
class ConversionRequest:
    """
    Everything a converter needs for one logical unit or bucket entry.

    Attributes:
        name: Display name of the item.
        kind: Definition subkind of the primary file.
        source_path: Primary file path relative to the project root.
        output_path: Target path relative to the output root.
        content: Primary file content.
        template: Template content, if the item has one.
        style: Style sheet content, if the item has one.
        stateful: For service-like entries, whether the service holds shared
            state and should become a hook.
    """

    name: str
    kind: DefinitionKind
    source_path: Path
    output_path: Path
    content: str
    template: str | None = None
    style: str | None = None
    stateful: bool = False


class ConversionStatus(StrEnum):
    CONVERTED = "converted"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ConversionResult:
    """
    Tagged outcome of converting one request.

    Failed results carry an error placeholder as their content and the
    collaborator's diagnostic in `error`; they are never written to disk.
    """

    request: ConversionRequest
    status: ConversionStatus
    content: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == ConversionStatus.CONVERTED


@dataclass
class PipelineReport:
    """
    Outcome of a full pipeline run.

    Attributes:
        inventory: The inventory that was converted.
        results: One result per request, in request order.
        written: Output paths (relative to the output root) that were written.
        issues: Every issue recorded during the run, scan issues included.
    """

    inventory: ProjectInventory
    results: list[ConversionResult] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    issues: list[PipelineIssue] = field(default_factory=list)

    @property
    def failed(self) -> list[ConversionResult]:
        """Results that did not convert, so a caller can retry just those."""
        return [r for r in self.results if not r.ok]

    @property
    def converted_count(self) -> int:
        return sum(1 for r in self.results if r.ok)
