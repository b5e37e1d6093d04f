"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception taxonomy for scanning and duplicate detection.

Only InvalidRootError is ever raised to callers of the scanner.
DirectoryAccessError and FileAccessError are produced as values by the
traversal steps, logged, and collected on the scanner for reporting.
"""

from typing import Optional


class MediaDupesError(Exception):
    """Base class for all errors raised by mediadupes."""


class InvalidRootError(MediaDupesError):
    """Root path is missing, not a directory, or unreadable."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid base path: {path!r} ({reason})")


# Name used by request-level callers
InvalidPathError = InvalidRootError


class AccessError(MediaDupesError):
    """A single filesystem node could not be read during traversal."""

    kind = "path"

    def __init__(self, path: str, cause: Optional[OSError] = None):
        self.path = path
        self.cause = cause
        detail = f": {cause.strerror or cause}" if cause is not None else ""
        super().__init__(f"Error reading {self.kind} {path}{detail}")


class DirectoryAccessError(AccessError):
    """Enumerating a directory failed; its subtree is abandoned."""

    kind = "directory"


class FileAccessError(AccessError):
    """Reading a file's metadata failed; the file is skipped."""

    kind = "file"


class ConfigError(MediaDupesError, ValueError):
    """Configuration file is unreadable or holds invalid values."""
