"""
Name extraction for definition files.

A definition may declare its logical name in code (an AngularJS registration
such as `.controller('barCtrl', ...)` or a pipe's `name:`). When it does not,
the name is derived from the file name with its definition suffix removed.
"""

import re

from constants import DEFAULT_HEURISTICS, NAME_PATTERNS
from core.models import SourceFile
from models import ClassificationHeuristics, DefinitionKind

_COMPILED_NAME_PATTERNS: dict[DefinitionKind, re.Pattern[str]] = {
    kind: re.compile(pattern) for kind, pattern in NAME_PATTERNS.items()
}


def extract_declared_name(content: str, kind: DefinitionKind | None) -> str | None:
    """
    Return the name declared in `content` for a definition of subkind `kind`.

    Absence of a match is not an error: callers fall back to the base name.
    """
    if kind is None:
        return None
    pattern = _COMPILED_NAME_PATTERNS.get(kind)
    if pattern is None:
        return None
    match = pattern.search(content)
    return match.group(1) if match else None


def strip_definition_suffix(
    stem: str, heuristics: ClassificationHeuristics = DEFAULT_HEURISTICS
) -> str:
    """
    Remove the first matching definition suffix from a file stem.

    "foo.component" becomes "foo" and "app-routing.module" becomes "app".
    A stem without a known suffix, or one that would become empty, is
    returned unchanged. Matching is case-insensitive; the result keeps the
    original case.
    """
    lowered = stem.lower()
    for rule_suffix, _ in heuristics["suffix_rules"]:
        if lowered.endswith(rule_suffix) and len(stem) > len(rule_suffix):
            return stem[: -len(rule_suffix)]
    return stem


def display_name(source_file: SourceFile) -> str:
    """Return the declared name of a file, else its base name."""
    return source_file.declared_name or source_file.base_name or source_file.path.stem


def component_name(name: str) -> str:
    """
    Turn a display name into a PascalCase identifier for the output file.

    Examples:
        >>> component_name("foo-bar")
        'FooBar'
        >>> component_name("barCtrl")
        'BarCtrl'
    """
    parts = [p for p in re.split(r"[^0-9A-Za-z]+", name) if p]
    if not parts:
        return "Unit"
    pascal = "".join(p[0].upper() + p[1:] for p in parts)
    if pascal[0].isdigit():
        pascal = f"Unit{pascal}"
    return pascal
