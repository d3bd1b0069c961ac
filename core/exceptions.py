"""
Custom exception classes for the ngshift CLI.

This module defines the application-specific exceptions raised while walking a
project, reading and writing files, and converting logical units. Only
`RootInaccessibleError` is fatal to a pipeline run; the others are caught at
item level by the orchestrator and turned into recorded issues or tagged
conversion results.
"""

import os
from typing import Optional


class RootInaccessibleError(Exception):
    """
    Raised when the project root cannot be opened for scanning.

    This is the only error that aborts a pipeline run. It is raised before any
    file is classified, so no partial inventory exists when it surfaces.

    Attributes:
        message: A human-readable error message describing what went wrong.
        root: The root path that could not be opened.
        original_exception: The underlying exception that caused this error, if any.
        diagnostic_info: Exception type, details and OS name, for reporting.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        root: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        self.message = message or "The project root cannot be accessed"
        super().__init__(self.message)
        self.root = root
        self.original_exception = original_exception
        self.diagnostic_info = {
            "type": (
                type(original_exception).__name__ if original_exception else "Unknown"
            ),
            "details": str(original_exception) if original_exception else "No details",
            "os_name": os.name,
        }


class FileIOError(Exception):
    """
    Base exception for file read/write errors.

    Attributes:
        message: A human-readable error message describing what went wrong.
        file_path: The path of the file involved, if known.
        original_exception: The underlying exception that caused this error, if any.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        file_path: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        self.message = message or "An error occurred during file I/O operation"
        super().__init__(self.message)
        self.file_path = file_path
        self.original_exception = original_exception


class InvalidFilePathError(FileIOError):
    """
    Raised when a path cannot be used, e.g. an output path escaping the
    output root or a writer used before a root was configured.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        file_path: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(
            message=message or "Invalid file path provided",
            file_path=file_path,
            original_exception=original_exception,
        )


class FileReadError(FileIOError):
    """Raised when a scanned file cannot be read. The file is skipped."""

    def __init__(
        self,
        message: Optional[str] = None,
        file_path: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(
            message=message or "Failed to read file",
            file_path=file_path,
            original_exception=original_exception,
        )


class FileWriteError(FileIOError):
    """Raised when converted output cannot be persisted."""

    def __init__(
        self,
        message: Optional[str] = None,
        file_path: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(
            message=message or "Failed to write to file",
            file_path=file_path,
            original_exception=original_exception,
        )


class ConversionError(Exception):
    """
    Raised by a converter when one logical unit or bucket entry cannot be
    converted.

    The orchestrator never lets this escape a run: it becomes a failed
    conversion result attached to the item.

    Attributes:
        message: A human-readable error message describing what went wrong.
        unit_name: Display name of the item being converted, if known.
        original_exception: The underlying exception that caused this error, if any.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        unit_name: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        self.message = message or "Failed to convert unit"
        super().__init__(self.message)
        self.unit_name = unit_name
        self.original_exception = original_exception
