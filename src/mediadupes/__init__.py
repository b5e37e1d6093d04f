"""
mediadupes: duplicate photo and video finder for large media trees.

Core features:
- Exact duplicates: same filename and same size
- Size duplicates: same size, different filenames
- Wasted-space statistics for both classes
- Ignored path prefixes, extension whitelist and minimum size filters
- JSON request API and CLI; deletion moves files to system trash (via send2trash)
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("mediadupes")
except PackageNotFoundError:
    import os as _os
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    _pyproject = _os.path.join(_os.path.dirname(__file__), "..", "..", "pyproject.toml")
    with open(_pyproject, "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API, only what users should import directly
from mediadupes.commands import ScanCommand, ScanReport
from mediadupes.core import (
    FileRecord, FilterPolicy, ExactDuplicateGroup, SizeDuplicateGroup,
    ScanParams, ScanStats, DuplicateStats, AnalysisResult,
    FileScannerImpl, DuplicateAnalyzerImpl,
    InvalidRootError, InvalidPathError, DirectoryAccessError, FileAccessError, ConfigError)
from mediadupes.config import AppConfig, load_config
from mediadupes.utils.convert_utils import ConvertUtils
from mediadupes.services.file_service import FileService
from mediadupes.api import DuplicateDetectorApi

__all__ = [
    "ScanCommand",
    "ScanReport",
    "FileRecord",
    "FilterPolicy",
    "ExactDuplicateGroup",
    "SizeDuplicateGroup",
    "ScanParams",
    "ScanStats",
    "DuplicateStats",
    "AnalysisResult",
    "FileScannerImpl",
    "DuplicateAnalyzerImpl",
    "InvalidRootError",
    "InvalidPathError",
    "DirectoryAccessError",
    "FileAccessError",
    "ConfigError",
    "AppConfig",
    "load_config",
    "ConvertUtils",
    "FileService",
    "DuplicateDetectorApi",
    "__version__",
]
