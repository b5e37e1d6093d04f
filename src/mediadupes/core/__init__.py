"""
Core detection engine: filter policy, scanner and duplicate analyzer.

This package contains the scan-and-detect pipeline of mediadupes:
- FilterPolicy: ignored path prefixes, extension whitelist and minimum size
- FileScannerImpl: directory traversal with per-directory/per-file failure isolation
- DuplicateAnalyzerImpl: exact (filename + size) and size-only grouping with statistics
- Models: FileRecord, duplicate groups, statistics and scan parameters

All components are pure Python with no I/O beyond reading the filesystem.
"""

from .errors import (
    MediaDupesError, InvalidRootError, InvalidPathError,
    AccessError, DirectoryAccessError, FileAccessError, ConfigError)
from .models import (
    FileRecord, FilterPolicy, ExactDuplicateGroup, SizeDuplicateGroup,
    ExtensionStats, ScanStats, DuplicateStats, AnalysisResult, ScanParams)
from .scanner import FileScannerImpl
from .analyzer import DuplicateAnalyzerImpl

__all__ = [
    "MediaDupesError",
    "InvalidRootError",
    "InvalidPathError",
    "AccessError",
    "DirectoryAccessError",
    "FileAccessError",
    "ConfigError",
    "FileRecord",
    "FilterPolicy",
    "ExactDuplicateGroup",
    "SizeDuplicateGroup",
    "ExtensionStats",
    "ScanStats",
    "DuplicateStats",
    "AnalysisResult",
    "ScanParams",
    "FileScannerImpl",
    "DuplicateAnalyzerImpl",
]
