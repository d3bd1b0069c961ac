"""
Tests for the association module.

Tests cover:
- Explicit references (templateUrl, styleUrl, styleUrls) and their resolution
- Naming-convention fallback, including conventional directories
- Claim uniqueness across logical units
"""

from pathlib import Path

import pytest

from core.association import (
    AssociationResolver,
    find_references,
    match_by_convention,
    match_reference,
)
from core.association import _STYLE_PATTERNS, _TEMPLATE_PATTERNS
from constants import TEMPLATE_DIRS


def _resolver(*files):
    return AssociationResolver(
        templates=[f for f in files if f.category == "template"],
        styles=[f for f in files if f.category == "style"],
    )


# ============================================================================
# Tests for find_references
# ============================================================================


@pytest.mark.unit
def test_find_template_reference():
    """templateUrl values are extracted."""
    content = "@Component({ templateUrl: './foo.component.html' })"

    assert find_references(content, _TEMPLATE_PATTERNS) == ["./foo.component.html"]


@pytest.mark.unit
def test_find_style_references_single_and_first_of_list():
    """styleUrl and the first styleUrls entry are both candidates."""
    content = "styleUrls: ['./a.scss', './b.scss'], styleUrl: './c.css'"

    assert find_references(content, _STYLE_PATTERNS) == ["./c.css", "./a.scss"]


# ============================================================================
# Tests for match_reference
# ============================================================================


@pytest.mark.unit
def test_match_reference_relative_path(source_file_factory):
    """Relative references resolve against the primary's directory."""
    template = source_file_factory("/p/app/shared/card.html")

    found = match_reference(
        Path("/p/app/foo/foo.component.ts"), "../shared/card.html", [template]
    )

    assert found is template


@pytest.mark.unit
def test_match_reference_ignores_extension(source_file_factory):
    """A reference to a compiled stylesheet matches its source."""
    style = source_file_factory("/p/app/foo.component.scss")

    found = match_reference(Path("/p/app/foo.component.ts"), "./foo.component.css", [style])

    assert found is style


@pytest.mark.unit
def test_match_reference_app_root_relative(source_file_factory):
    """References relative to the app root match by path suffix."""
    template = source_file_factory("/p/src/app/views/bar.html")

    found = match_reference(Path("/p/src/app/js/bar.js"), "app/views/bar.html", [template])

    assert found is template


@pytest.mark.unit
def test_match_reference_strips_query_string(source_file_factory):
    """Cache-busting query strings are ignored."""
    template = source_file_factory("/p/app/views/bar.html")

    found = match_reference(Path("/p/app/bar.js"), "views/bar.html?v=3", [template])

    assert found is template


@pytest.mark.unit
def test_match_reference_missing_target(source_file_factory):
    """A reference to a file that was not scanned matches nothing."""
    template = source_file_factory("/p/app/other.html")

    assert match_reference(Path("/p/app/foo.ts"), "./missing.html", [template]) is None


# ============================================================================
# Tests for match_by_convention
# ============================================================================


@pytest.mark.unit
def test_convention_same_directory(source_file_factory):
    """Same base name in the same directory is a match."""
    primary = source_file_factory("/p/app/foo.component.ts")
    template = source_file_factory("/p/app/foo.component.html")

    assert match_by_convention(primary, [template], TEMPLATE_DIRS) is template


@pytest.mark.unit
def test_convention_conventional_child_directory(source_file_factory):
    """Templates may live in a "views" directory next to the controller."""
    primary = source_file_factory("/p/app/bar.controller.js")
    template = source_file_factory("/p/app/views/bar.html")

    assert match_by_convention(primary, [template], TEMPLATE_DIRS) is template


@pytest.mark.unit
def test_convention_conventional_sibling_directory(source_file_factory):
    """Templates may live in a "views" directory beside the scripts directory."""
    primary = source_file_factory("/p/app/scripts/bar.controller.js")
    template = source_file_factory("/p/app/views/bar.html")

    assert match_by_convention(primary, [template], TEMPLATE_DIRS) is template


@pytest.mark.unit
def test_convention_matches_yeoman_layout(source_file_factory):
    """app/scripts/controllers/main.js pairs with app/views/main.html."""
    primary = source_file_factory(
        "/p/app/scripts/controllers/main.js",
        "angular.module('app').controller('MainCtrl', fn);",
    )
    template = source_file_factory("/p/app/views/main.html")

    assert match_by_convention(primary, [template], TEMPLATE_DIRS) is template


@pytest.mark.unit
def test_convention_matches_any_directory(source_file_factory):
    """Base-name equality is enough, wherever the candidate lives."""
    primary = source_file_factory("/p/app/foo/foo.component.ts")
    template = source_file_factory("/p/app/bar/foo.component.html")

    assert match_by_convention(primary, [template], TEMPLATE_DIRS) is template


@pytest.mark.unit
def test_convention_prefers_nearer_candidates(source_file_factory):
    """Location breaks ties: same directory, then nearby views, then anywhere."""
    primary = source_file_factory("/p/app/foo/foo.component.ts")
    elsewhere = source_file_factory("/p/lib/foo.component.html")
    far_views = source_file_factory("/p/legacy/views/foo.html")
    near_views = source_file_factory("/p/app/foo/views/foo.html")
    same_dir = source_file_factory("/p/app/foo/foo.component.html")

    candidates = [elsewhere, far_views, near_views, same_dir]
    assert match_by_convention(primary, candidates, TEMPLATE_DIRS) is same_dir
    assert match_by_convention(primary, candidates[:3], TEMPLATE_DIRS) is near_views
    assert match_by_convention(primary, candidates[:2], TEMPLATE_DIRS) is far_views
    assert match_by_convention(primary, candidates[:1], TEMPLATE_DIRS) is elsewhere


@pytest.mark.unit
def test_convention_keeps_traversal_order_within_a_rank(source_file_factory):
    """Equally ranked candidates are taken in traversal order."""
    primary = source_file_factory("/p/app/foo.component.ts")
    first = source_file_factory("/p/a/foo.html")
    second = source_file_factory("/p/b/foo.html")

    assert match_by_convention(primary, [first, second], TEMPLATE_DIRS) is first


# ============================================================================
# Tests for AssociationResolver
# ============================================================================


@pytest.mark.unit
def test_resolver_by_convention(source_file_factory):
    """A component picks up the template and style sharing its base name."""
    primary = source_file_factory("/p/app/foo.component.ts", "@Component({})")
    template = source_file_factory("/p/app/foo.component.html")
    style = source_file_factory("/p/app/foo.component.scss")

    unit = _resolver(template, style).resolve(primary)

    assert unit.name == "foo"
    assert unit.template is template
    assert unit.style is style


@pytest.mark.unit
def test_explicit_reference_beats_convention(source_file_factory):
    """An explicit templateUrl wins over a same-named neighbor."""
    primary = source_file_factory(
        "/p/app/foo.component.ts",
        "@Component({ templateUrl: './shared.html' })",
    )
    conventional = source_file_factory("/p/app/foo.component.html")
    explicit = source_file_factory("/p/app/shared.html")

    unit = _resolver(conventional, explicit).resolve(primary)

    assert unit.template is explicit


@pytest.mark.unit
def test_missing_explicit_reference_falls_back_to_convention(source_file_factory):
    """A reference to an unscanned file falls back to naming conventions."""
    primary = source_file_factory(
        "/p/app/foo.component.ts",
        "@Component({ templateUrl: './gone.html' })",
    )
    template = source_file_factory("/p/app/foo.component.html")

    unit = _resolver(template).resolve(primary)

    assert unit.template is template


@pytest.mark.unit
def test_missing_reference_and_no_convention_leaves_slot_empty(source_file_factory):
    """When both phases fail the slot is empty and nothing is raised."""
    primary = source_file_factory(
        "/p/app/foo.component.ts",
        "@Component({ templateUrl: './gone.html', styleUrls: ['./gone.css'] })",
    )

    unit = _resolver().resolve(primary)

    assert unit.template is None
    assert unit.style is None


@pytest.mark.unit
def test_claimed_file_not_offered_again(source_file_factory):
    """Two definitions never share a template."""
    first = source_file_factory(
        "/p/app/a.component.ts", "@Component({ templateUrl: './shared.html' })"
    )
    second = source_file_factory(
        "/p/app/b.component.ts", "@Component({ templateUrl: './shared.html' })"
    )
    shared = source_file_factory("/p/app/shared.html")
    resolver = _resolver(shared)

    first_unit = resolver.resolve(first)
    second_unit = resolver.resolve(second)

    assert first_unit.template is shared
    assert second_unit.template is None
    assert resolver.claimed == {shared.path}
