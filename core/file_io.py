from pathlib import Path
from typing import Callable, Protocol

from core.exceptions import FileReadError, FileWriteError, InvalidFilePathError


class FileReader(Protocol):
    """
    Protocol defining the interface for reading scanned files.

    This protocol allows different implementations for production (filesystem)
    and testing (mocks).
    """

    def read_file(self, file_path: Path) -> str:
        """
        Read the text content of a file as UTF-8.

        Args:
            file_path: The path to the file to read.

        Returns:
            The file content as a string.

        Raises:
            FileReadError: If the file cannot be read.
        """


class FileWriter(Protocol):
    """
    Protocol defining the interface for persisting converted output.

    Paths are relative to the writer's output root. Writing the same path
    twice overwrites the previous content.
    """

    def write(self, relative_path: Path, content: str) -> Path:
        """
        Write content to a path under the output root.

        Args:
            relative_path: Target path relative to the output root.
            content: Text to write.

        Returns:
            The absolute path that was written.

        Raises:
            InvalidFilePathError: If the path escapes the output root.
            FileWriteError: If writing fails.
        """


class FilesystemFileReader:

    def read_file(self, file_path: Path) -> str:
        """
        Read the text content of a file as UTF-8.

        Binary files are read as an empty string. Invalid UTF-8 characters are
        silently ignored (errors="ignore"). Missing files and other I/O errors
        raise FileReadError so the caller can record the file as skipped.

        Args:
            file_path: The path to the file to read.

        Returns:
            The file content as a string, or an empty string if the file is binary.

        Raises:
            FileReadError: If the file is missing or an I/O error occurs.
        """
        if not file_path.is_file():
            raise FileReadError(
                message=f"Not a readable file: {file_path}",
                file_path=str(file_path),
            )

        # Binary payloads carry no convertible text
        if self._is_binary_file(file_path):
            return ""

        try:
            with file_path.open("r", encoding="utf-8", errors="ignore") as f:
                return f.read()
        except OSError as e:
            raise FileReadError(
                message=f"Failed to read file: {file_path}",
                file_path=str(file_path),
                original_exception=e,
            ) from e

    def _is_binary_file(self, file_path: Path) -> bool:
        """
        Check the first 1024 bytes of a file for null bytes.

        Returns:
            bool: True if the file looks binary. Read errors are left to
                read_file, which reports them.
        """
        try:
            with open(file_path, "rb") as f:
                return b"\0" in f.read(1024)
        except OSError:
            return False


class OutputWriter:
    """
    Writes converted files under an output root.

    Parent directories are created on demand and existing files are
    overwritten, so re-running a conversion is idempotent.
    """

    def __init__(self, output_root: Path):
        self.output_root = output_root

    def write(self, relative_path: Path, content: str) -> Path:
        """
        Write content to `output_root / relative_path`.

        Args:
            relative_path: Target path relative to the output root.
            content: Text to write.

        Returns:
            The absolute path that was written.

        Raises:
            InvalidFilePathError: If the target resolves outside the output root.
            FileWriteError: If the directory cannot be created or the write fails.
        """
        root = self.output_root.resolve()
        target = (root / relative_path).resolve()
        if not target.is_relative_to(root):
            raise InvalidFilePathError(
                message=f"Output path escapes the output root: {relative_path}",
                file_path=str(relative_path),
            )

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise FileWriteError(
                message=f"Failed to write to file: {target}",
                file_path=str(target),
                original_exception=e,
            ) from e

        return target


class MockFileReader:
    """
    Mock implementation of FileReader for testing.

    Returns configurable file contents, allowing tests to control file reading
    behavior without touching the filesystem.
    """

    def __init__(
        self,
        return_value: str | None = None,
        read_file_fn: Callable[[Path], str] | None = None,
    ):
        """
        Initialize MockFileReader with configurable reading behavior.

        Args:
            return_value: If provided, always returns this value regardless of input.
                Takes precedence over read_file_fn if both are provided.
            read_file_fn: Optional callable that takes a file path and returns file
                content. It may raise FileReadError to simulate unreadable files.

        Attributes (for test inspection):
            read_file_calls: List of file paths passed to read_file()
        """
        self.return_value = return_value
        self.read_file_fn = read_file_fn
        self.read_file_calls: list[Path] = []

    def read_file(self, file_path: Path) -> str:
        self.read_file_calls.append(file_path)
        if self.return_value is not None:
            return self.return_value
        if self.read_file_fn is not None:
            return self.read_file_fn(file_path)
        return ""


class MockFileWriter:
    """
    Mock implementation of FileWriter for testing.

    Keeps written content in memory keyed by relative path. Paths listed in
    `fail_paths` raise FileWriteError instead of being stored.
    """

    def __init__(self, fail_paths: set[Path] | None = None):
        self.fail_paths = fail_paths or set()
        self.written: dict[Path, str] = {}
        self.write_calls: list[Path] = []

    def write(self, relative_path: Path, content: str) -> Path:
        self.write_calls.append(relative_path)
        if relative_path in self.fail_paths:
            raise FileWriteError(
                message=f"Simulated write failure: {relative_path}",
                file_path=str(relative_path),
            )
        self.written[relative_path] = content
        return relative_path
