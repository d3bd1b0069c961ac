"""
Tests for the walker module.

Tests cover:
- Depth-first, sorted traversal order
- Excluded directories and file patterns
- Root validation (RootInaccessibleError)
- Symbolic links: broken links and directory cycles
"""

import os

import pytest

from constants import EXCLUDED_DIRS, EXCLUDED_FILE_PATTERNS
from core.exceptions import RootInaccessibleError
from core.models import IssueKind
from core.walker import walk_directory


def _relative(root, paths):
    return [p.relative_to(root).as_posix() for p in paths]


@pytest.mark.unit
def test_walk_yields_files_depth_first_in_sorted_order(make_project):
    """A subdirectory is fully walked before the next sibling entry."""
    root = make_project(
        {
            "b.ts": "",
            "a/z.ts": "",
            "a/inner/y.ts": "",
            "c.html": "",
        }
    )

    paths = list(walk_directory(root, EXCLUDED_DIRS))

    assert _relative(root, paths) == ["a/inner/y.ts", "a/z.ts", "b.ts", "c.html"]


@pytest.mark.unit
def test_walk_is_reproducible(make_project):
    """Walking the same tree twice gives the same order."""
    root = make_project({"x/1.ts": "", "y/2.ts": "", "0.ts": ""})

    first = list(walk_directory(root, EXCLUDED_DIRS))
    second = list(walk_directory(root, EXCLUDED_DIRS))

    assert first == second


@pytest.mark.unit
def test_walk_skips_excluded_directories(make_project):
    """node_modules, dist and friends are never entered."""
    root = make_project(
        {
            "src/app.ts": "",
            "node_modules/lib/index.js": "",
            "dist/main.js": "",
            ".git/config.js": "",
        }
    )

    paths = list(walk_directory(root, EXCLUDED_DIRS))

    assert _relative(root, paths) == ["src/app.ts"]


@pytest.mark.unit
def test_walk_skips_excluded_file_patterns(make_project):
    """Unit test files and type declarations are not yielded."""
    root = make_project(
        {
            "app/foo.component.ts": "",
            "app/foo.component.spec.ts": "",
            "typings/global.d.ts": "",
        }
    )

    paths = list(walk_directory(root, EXCLUDED_DIRS, EXCLUDED_FILE_PATTERNS))

    assert _relative(root, paths) == ["app/foo.component.ts"]


@pytest.mark.unit
def test_walk_is_lazy(make_project):
    """The walker returns a generator."""
    root = make_project({"a.ts": "", "b.ts": ""})

    walker = walk_directory(root, EXCLUDED_DIRS)

    assert next(walker).name == "a.ts"


@pytest.mark.unit
def test_walk_missing_root_raises(tmp_path):
    """A missing root fails immediately with RootInaccessibleError."""
    missing = tmp_path / "nope"

    with pytest.raises(RootInaccessibleError) as exc_info:
        walk_directory(missing, EXCLUDED_DIRS)

    assert exc_info.value.root == str(missing.absolute())


@pytest.mark.unit
def test_walk_file_as_root_raises(tmp_path):
    """A file is not a valid root."""
    file_root = tmp_path / "file.ts"
    file_root.write_text("", encoding="utf-8")

    with pytest.raises(RootInaccessibleError):
        walk_directory(file_root, EXCLUDED_DIRS)


@pytest.mark.unit
@pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
def test_walk_records_broken_symlink(make_project):
    """Broken symbolic links are skipped and recorded."""
    root = make_project({"a.ts": ""})
    (root / "dangling.ts").symlink_to(root / "missing.ts")
    issues = []

    paths = list(walk_directory(root, EXCLUDED_DIRS, issues=issues))

    assert _relative(root, paths) == ["a.ts"]
    assert len(issues) == 1
    assert issues[0].kind == IssueKind.FILE_READ_SKIPPED
    assert issues[0].path.endswith("dangling.ts")


@pytest.mark.unit
@pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
def test_walk_does_not_loop_on_directory_cycles(make_project):
    """A symlink pointing back up the tree is not followed twice."""
    root = make_project({"app/a.ts": ""})
    (root / "app" / "loop").symlink_to(root, target_is_directory=True)

    paths = list(walk_directory(root, EXCLUDED_DIRS))

    assert _relative(root, paths) == ["app/a.ts"]
