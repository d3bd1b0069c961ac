"""File classification module.

This module maps a scanned file to its structural role in an Angular /
AngularJS project. The decision only looks at the extension, the file name and,
for ambiguous script files, a lightweight search of the content. No parsing is
involved.

Decision order (first match wins):
1. Unrecognized extension: the file is excluded (no category at all).
2. Style or markup extension: STYLE or TEMPLATE. Auxiliary extensions are
   recognized but UNCLASSIFIED.
3. Definition extension: refined by the ordered suffix table
   (e.g. "foo.service.ts" is a service).
4. No suffix on a sniffable extension: the ordered content table decides
   (e.g. a ".js" file calling `.controller(` is a controller).
5. Anything left is an OTHER definition.

All rule tables live in `constants.DEFAULT_HEURISTICS` and can be replaced
through the pipeline configuration.
"""

from dataclasses import dataclass
from pathlib import Path

from constants import DEFAULT_HEURISTICS, STATEFUL_SERVICE_TOKENS
from models import Category, ClassificationHeuristics, DefinitionKind


@dataclass(frozen=True)
class Classification:
    """Category of a file plus its definition subkind, when it has one."""

    category: Category
    kind: DefinitionKind | None = None


def is_recognized(
    path: Path, heuristics: ClassificationHeuristics = DEFAULT_HEURISTICS
) -> bool:
    """Return True if the file's extension belongs to any known category."""
    suffix = path.suffix.lower()
    return (
        suffix in heuristics["definition_extensions"]
        or suffix in heuristics["template_extensions"]
        or suffix in heuristics["style_extensions"]
        or suffix in heuristics["auxiliary_extensions"]
    )


def classify(
    path: Path,
    content: str | None = None,
    heuristics: ClassificationHeuristics = DEFAULT_HEURISTICS,
) -> Classification | None:
    """
    Classify a file by extension, name convention and, if needed, content.

    Args:
        path: The file path. Only its name is inspected.
        content: The file content. Only used for content sniffing; when None,
            files without a matching suffix are OTHER definitions.
        heuristics: The rule tables to apply.

    Returns:
        The file's Classification, or None when the extension is not
        recognized and the file must be dropped.
    """
    suffix = path.suffix.lower()

    if suffix in heuristics["style_extensions"]:
        return Classification(Category.STYLE)
    if suffix in heuristics["template_extensions"]:
        return Classification(Category.TEMPLATE)
    if suffix in heuristics["auxiliary_extensions"]:
        return Classification(Category.UNCLASSIFIED)
    if suffix not in heuristics["definition_extensions"]:
        return None

    kind = kind_from_suffix(path, heuristics)
    if kind is None and content and suffix in heuristics["sniffable_extensions"]:
        kind = sniff_kind(content, heuristics)

    return Classification(Category.DEFINITION, kind or DefinitionKind.OTHER)


def kind_from_suffix(
    path: Path, heuristics: ClassificationHeuristics = DEFAULT_HEURISTICS
) -> DefinitionKind | None:
    """Return the subkind of the first suffix rule matching the file stem."""
    stem = path.stem.lower()
    for rule_suffix, kind in heuristics["suffix_rules"]:
        if stem.endswith(rule_suffix):
            return kind
    return None


def sniff_kind(
    content: str, heuristics: ClassificationHeuristics = DEFAULT_HEURISTICS
) -> DefinitionKind | None:
    """Return the subkind of the first token family found in `content`."""
    for kind, tokens in heuristics["content_rules"]:
        if any(token in content for token in tokens):
            return kind
    return None


def is_stateful_service(
    content: str, tokens: tuple[str, ...] = STATEFUL_SERVICE_TOKENS
) -> bool:
    """
    Decide whether a service-like file holds shared state.

    Stateful services are converted into hooks, stateless ones into plain
    modules. The check is a shallow substring search and can misjudge a
    service that merely mentions one of the tokens.
    """
    return any(token in content for token in tokens)
