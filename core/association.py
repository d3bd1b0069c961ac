"""Template and style association for component-like definitions.

For every component, controller or directive file the resolver picks at most
one template and at most one style sheet, in two phases:

1. Explicit reference: a `templateUrl`, `styleUrl` or first `styleUrls` entry
   in the definition's content is matched against the scanned files, first by
   resolved path (extension-insensitive), then by path suffix for
   app-root-relative references. A reference that matches nothing falls
   through to phase 2.
2. Naming convention: the first unclaimed file whose base name equals the
   definition's base name. Files next to the definition are preferred, then
   files in a conventional directory ("views", "styles", ...) near it, then
   in any conventional directory, then anywhere in the project.

Every match is a claim: a claimed file is never offered to a later
definition, so two logical units never share a template or a style. Claims
are order-sensitive shared state; resolve definitions one at a time, in
traversal order.
"""

import os
import re
from pathlib import Path, PurePosixPath
from typing import Iterable

from constants import (
    STYLE_DIRS,
    STYLE_REFERENCE_PATTERNS,
    TEMPLATE_DIRS,
    TEMPLATE_REFERENCE_PATTERNS,
)
from core.models import LogicalUnit, SourceFile
from core.names import display_name

_TEMPLATE_PATTERNS = tuple(re.compile(p) for p in TEMPLATE_REFERENCE_PATTERNS)
_STYLE_PATTERNS = tuple(re.compile(p) for p in STYLE_REFERENCE_PATTERNS)


class AssociationResolver:
    """
    Resolves templates and styles for primary definitions, tracking claims.

    Attributes:
        templates: Candidate template files, in traversal order.
        styles: Candidate style files, in traversal order.
        claimed: Paths already assigned to a logical unit.
    """

    def __init__(
        self,
        templates: Iterable[SourceFile],
        styles: Iterable[SourceFile],
        template_dirs: frozenset[str] = TEMPLATE_DIRS,
        style_dirs: frozenset[str] = STYLE_DIRS,
    ):
        self.templates = list(templates)
        self.styles = list(styles)
        self.template_dirs = template_dirs
        self.style_dirs = style_dirs
        self.claimed: set[Path] = set()

    def resolve(self, primary: SourceFile) -> LogicalUnit:
        """
        Build the logical unit for `primary`, claiming its template and style.

        Args:
            primary: A component, controller or directive definition.

        Returns:
            LogicalUnit: The unit. Slots with no match are left empty.
        """
        template = self._claim(
            primary, self.templates, _TEMPLATE_PATTERNS, self.template_dirs
        )
        style = self._claim(primary, self.styles, _STYLE_PATTERNS, self.style_dirs)
        return LogicalUnit(
            primary=primary,
            name=display_name(primary),
            template=template,
            style=style,
        )

    def _claim(
        self,
        primary: SourceFile,
        pool: list[SourceFile],
        patterns: tuple[re.Pattern[str], ...],
        conventional_dirs: frozenset[str],
    ) -> SourceFile | None:
        candidates = [f for f in pool if f.path not in self.claimed]
        if not candidates:
            return None

        found = None
        for reference in find_references(primary.content, patterns):
            found = match_reference(primary.path, reference, candidates)
            if found is not None:
                break

        if found is None:
            found = match_by_convention(primary, candidates, conventional_dirs)

        if found is not None:
            self.claimed.add(found.path)
        return found


def find_references(
    content: str, patterns: Iterable[re.Pattern[str]]
) -> list[str]:
    """Return every quoted external reference in `content`, pattern order first."""
    references: list[str] = []
    for pattern in patterns:
        for match in pattern.finditer(content):
            reference = match.group(1).strip()
            if reference and reference not in references:
                references.append(reference)
    return references


def match_reference(
    primary_path: Path, reference: str, candidates: list[SourceFile]
) -> SourceFile | None:
    """
    Find the candidate an explicit reference points at.

    Relative references are resolved against the primary file's directory and
    compared with the candidates' paths, exact match first, then ignoring the
    extension. If that fails, the reference's path parts are matched against
    the tail of each candidate path (references relative to an app root such
    as "app/views/bar.html" or "/views/bar.html").
    """
    reference = reference.replace("\\", "/").split("?", 1)[0].split("#", 1)[0]
    if not reference:
        return None

    if not reference.startswith("/"):
        resolved = os.path.normpath(primary_path.parent / reference)
        for candidate in candidates:
            if os.path.normpath(candidate.path) == resolved:
                return candidate
        resolved_stem = os.path.splitext(resolved)[0]
        for candidate in candidates:
            if os.path.splitext(os.path.normpath(candidate.path))[0] == resolved_stem:
                return candidate

    parts = tuple(
        p for p in PurePosixPath(reference).parts if p not in ("/", ".", "..")
    )
    if not parts:
        return None
    for candidate in candidates:
        if candidate.path.parts[-len(parts) :] == parts:
            return candidate
    return None


def match_by_convention(
    primary: SourceFile,
    candidates: list[SourceFile],
    conventional_dirs: frozenset[str],
) -> SourceFile | None:
    """
    Return the best candidate sharing the primary's base name.

    Base-name equality is the only requirement. Location breaks ties, in this
    order: the primary's own directory, a conventional directory next to or
    below it, any conventional directory, anywhere else. Candidates of equal
    rank keep traversal order.
    """
    base = primary.base_name.lower()
    if not base:
        return None

    matches = [c for c in candidates if c.base_name.lower() == base]
    if not matches:
        return None
    return min(
        matches, key=lambda c: _location_rank(primary.path, c.path, conventional_dirs)
    )


def _location_rank(
    primary_path: Path, candidate_path: Path, conventional_dirs: frozenset[str]
) -> int:
    primary_dir = primary_path.parent
    candidate_dir = candidate_path.parent
    if candidate_dir == primary_dir:
        return 0
    if candidate_dir.name.lower() in conventional_dirs:
        if candidate_dir.parent in (primary_dir, primary_dir.parent):
            return 1
        return 2
    return 3
