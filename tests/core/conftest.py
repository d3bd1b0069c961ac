"""
Shared fixtures for core module tests.

This module provides reusable pytest fixtures for testing core functionality,
including project tree builders, source file factories and test doubles.
"""

import pytest
from pathlib import Path
from unittest.mock import MagicMock

from core.config import PipelineConfig
from core.file_io import MockFileReader
from core.inventory import load_source_file
from core.tokens import NoOpTokenCounter
from ui.progress_display import NoOpProgressDisplay


@pytest.fixture
def project_root(tmp_path):
    """Create a temporary project root for testing."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def make_project(project_root):
    """
    Factory writing a project tree under `project_root`.

    Takes a mapping of relative paths to file contents and returns the root.
    """

    def _factory(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = project_root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return project_root

    return _factory


@pytest.fixture
def source_file_factory():
    """Factory building a classified SourceFile without touching the disk."""

    def _factory(path: str, content: str = ""):
        return load_source_file(Path(path), MockFileReader(return_value=content))

    return _factory


@pytest.fixture
def pipeline_config(project_root, tmp_path):
    """PipelineConfig pointing at the temporary project."""
    return PipelineConfig(
        root=project_root,
        output_root=tmp_path / "out",
        max_concurrency=2,
        read_workers=2,
    )


@pytest.fixture
def token_counter():
    """Token counter for testing."""
    return NoOpTokenCounter(return_value=100)


@pytest.fixture
def progress_display():
    """Progress display for testing."""
    return NoOpProgressDisplay()


@pytest.fixture
def tracking_progress_display():
    """Progress display that tracks calls for testing."""
    mock = MagicMock()
    mock.calls = []

    def make_tracker(method_name):
        def tracker(*args, **kwargs):
            if method_name == "update":
                mock.calls.append(
                    (method_name, kwargs.get("advance"), kwargs.get("description"))
                )
            else:
                mock.calls.append((method_name, *args))

        return tracker

    mock.on_start = make_tracker("start")
    mock.on_update = make_tracker("update")
    mock.on_complete = make_tracker("complete")
    mock.__enter__ = MagicMock(return_value=mock)
    mock.__exit__ = MagicMock(return_value=None)

    return mock


@pytest.fixture
def mock_file_reader_factory():
    """Factory for creating MockFileReader instances with file content mappings."""

    def _factory(file_contents: dict[str, str]):
        """
        Create a MockFileReader configured with file content mappings.

        Args:
            file_contents: Dictionary mapping file names to their content.

        Returns:
            MockFileReader instance configured to return content based on file name.
        """

        def read_file_side_effect(path: Path) -> str:
            return file_contents.get(path.name, "")

        return MockFileReader(read_file_fn=read_file_side_effect)

    return _factory
