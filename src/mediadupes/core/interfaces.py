"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the detection pipeline.
These protocols use Python's `typing.Protocol` so the command layer depends on
structure rather than on concrete classes.

Key Components:
---------------
- FileScanner: walks a directory tree and returns file records plus statistics.
- DuplicateAnalyzer: groups file records into exact and size-only duplicates.
"""

from typing import Protocol, List
from mediadupes.core.models import FileRecord, ScanStats, AnalysisResult


class FileScanner(Protocol):
    """
    Interface for scanning file systems and collecting file metadata.
    """
    def scan(self) -> List[FileRecord]:
        """
        Scan files from the configured root directory.

        Returns:
            File records matching the filter policy.

        Raises:
            InvalidRootError: if the root cannot be scanned at all.
        """
        ...

    def get_stats(self) -> ScanStats:
        """Statistics about the most recent scan."""
        ...


class DuplicateAnalyzer(Protocol):
    """
    Interface for the duplicate grouping engine.
    """
    def analyze(self, files: List[FileRecord]) -> AnalysisResult:
        """
        Compute exact duplicates, size-only duplicates and summary statistics.

        Args:
            files: Records produced by a scanner. Not modified.

        Returns:
            AnalysisResult recomputed from scratch on every call.
        """
        ...
