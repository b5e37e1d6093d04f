"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for media scanning and duplicate detection.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Iterable, Tuple, FrozenSet, TYPE_CHECKING
import os

from mediadupes.utils.convert_utils import ConvertUtils

if TYPE_CHECKING:
    from mediadupes.config import AppConfig


PATH_SEPARATORS = "/\\"


def split_extension(filename: str) -> Tuple[str, str]:
    """Split a filename into (base name, lower-case extension without dot)."""
    base, ext = os.path.splitext(filename)
    return base, ext[1:].lower()


def normalize_extension(ext: str) -> str:
    """'.JPG' -> 'jpg'"""
    return ext.strip().lower().lstrip(".")


def absolute_path(path: str) -> str:
    """Expand '~' and make the path absolute. Scan roots and ignored prefixes both go through here."""
    return os.path.abspath(os.path.expanduser(path))


def normalize_path_prefix(path: str) -> str:
    """Resolve like a scan root, then strip trailing separators; a bare separator stays as is."""
    path = absolute_path(path)
    return path.rstrip(PATH_SEPARATORS) or path[:1]


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """
    One scanned file. Immutable once created.
    """
    filename: str
    path: str
    size: int  # in bytes
    base_name: str
    extension: str  # lower-case, no leading dot
    modified_time: float

    @classmethod
    def from_stat(cls, path: str, stat_result: os.stat_result) -> "FileRecord":
        filename = os.path.basename(path)
        base_name, extension = split_extension(filename)
        return cls(
            filename=filename,
            path=path,
            size=stat_result.st_size,
            base_name=base_name,
            extension=extension,
            modified_time=stat_result.st_mtime,
        )

    def to_dict(self) -> Dict:
        return {
            "filename": self.filename,
            "filepath": self.path,
            "filesize": self.size,
            "basename": self.base_name,
            "extension": self.extension,
            "modified_time": self.modified_time,
        }

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class FilterPolicy:
    """
    Inclusion rules applied while scanning.

    A path is ignored if it starts with any ignored prefix. This is a plain
    string comparison, so the prefix '/media/a' also ignores '/media/ab'.
    Prefixes are stored absolute with '~' expanded, matching the scanned paths.
    """
    ignored_prefixes: Tuple[str, ...] = ()
    allowed_extensions: FrozenSet[str] = frozenset()
    min_size: int = 0

    @classmethod
    def create(
            cls,
            ignored_paths: Iterable[str] = (),
            extensions: Iterable[str] = (),
            min_size: int = 0
    ) -> "FilterPolicy":
        """Build a policy from raw user input, normalizing paths and extensions."""
        prefixes = []
        for path in ignored_paths:
            path = path.strip()
            if not path:
                continue
            prefix = normalize_path_prefix(path)
            if prefix not in prefixes:
                prefixes.append(prefix)

        allowed = frozenset(
            ext for ext in (normalize_extension(e) for e in extensions) if ext
        )

        if min_size < 0:
            raise ValueError("Minimum size cannot be negative")

        return cls(ignored_prefixes=tuple(prefixes), allowed_extensions=allowed, min_size=min_size)

    def should_ignore(self, path: str) -> bool:
        normalized = path.rstrip(PATH_SEPARATORS)
        return any(normalized.startswith(prefix) for prefix in self.ignored_prefixes)

    def is_allowed_extension(self, filename: str) -> bool:
        _, ext = split_extension(filename)
        return ext in self.allowed_extensions

    def passes_size(self, size: int) -> bool:
        return size >= self.min_size


@dataclass
class ExactDuplicateGroup:
    """
    Files sharing both filename and size.
    """
    filename: str
    size: int
    files: List[FileRecord] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, int]:
        return self.filename, self.size

    @property
    def count(self) -> int:
        return len(self.files)

    @property
    def wasted_space(self) -> int:
        """Bytes freed by keeping a single copy."""
        return self.size * (self.count - 1)

    @property
    def size_formatted(self) -> str:
        return ConvertUtils.bytes_to_human(self.size)

    def to_dict(self) -> Dict:
        return {
            "group_key": f"{self.filename}|{self.size}",
            "filename": self.filename,
            "filesize": self.size,
            "filesize_formatted": self.size_formatted,
            "count": self.count,
            "wasted_space": self.wasted_space,
            "files": [f.to_dict() for f in self.files],
        }

    def __repr__(self):
        return f"<ExactDuplicateGroup filename={self.filename}, size={self.size}, count={self.count}>"


@dataclass
class SizeDuplicateGroup:
    """
    Files sharing a size but carrying at least two different filenames.
    """
    size: int
    files: List[FileRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.files)

    @property
    def unique_filename_count(self) -> int:
        return len({f.filename for f in self.files})

    @property
    def potential_space(self) -> int:
        return self.size * (self.count - 1)

    @property
    def size_formatted(self) -> str:
        return ConvertUtils.bytes_to_human(self.size)

    def to_dict(self) -> Dict:
        return {
            "filesize": self.size,
            "filesize_formatted": self.size_formatted,
            "count": self.count,
            "unique_filenames": self.unique_filename_count,
            "potential_space": self.potential_space,
            "files": [f.to_dict() for f in self.files],
        }

    def __repr__(self):
        return f"<SizeDuplicateGroup size={self.size}, count={self.count}>"


# ======================
#  Statistics
# ======================

@dataclass
class ExtensionStats:
    count: int = 0
    size: int = 0


@dataclass
class ScanStats:
    """
    Totals computed once after a scan has finished.
    """
    total_files: int = 0
    total_scanned: int = 0
    total_size: int = 0
    extensions: Dict[str, ExtensionStats] = field(default_factory=dict)
    skipped_directories: int = 0
    skipped_files: int = 0

    @classmethod
    def from_records(
            cls,
            records: List[FileRecord],
            total_scanned: int,
            skipped_directories: int = 0,
            skipped_files: int = 0
    ) -> "ScanStats":
        stats = cls(
            total_files=len(records),
            total_scanned=total_scanned,
            skipped_directories=skipped_directories,
            skipped_files=skipped_files,
        )
        for record in records:
            stats.total_size += record.size
            ext_stats = stats.extensions.setdefault(record.extension, ExtensionStats())
            ext_stats.count += 1
            ext_stats.size += record.size
        return stats

    def to_dict(self) -> Dict:
        return {
            "total_files": self.total_files,
            "total_scanned": self.total_scanned,
            "total_size": self.total_size,
            "total_size_formatted": ConvertUtils.bytes_to_human(self.total_size),
            "skipped_directories": self.skipped_directories,
            "skipped_files": self.skipped_files,
            "extensions": {
                ext: {"count": s.count, "size": s.size}
                for ext, s in self.extensions.items()
            },
        }


@dataclass
class DuplicateStats:
    """
    Aggregate figures for both duplicate classes.
    """
    exact_duplicate_groups: int = 0
    exact_duplicate_files: int = 0
    exact_duplicate_wasted_space: int = 0
    size_duplicate_groups: int = 0
    size_duplicate_files: int = 0
    size_duplicate_potential_space: int = 0

    @property
    def exact_duplicate_wasted_space_formatted(self) -> str:
        return ConvertUtils.bytes_to_human(self.exact_duplicate_wasted_space)

    @property
    def size_duplicate_potential_space_formatted(self) -> str:
        return ConvertUtils.bytes_to_human(self.size_duplicate_potential_space)

    def to_dict(self) -> Dict:
        return {
            "exact_duplicate_groups": self.exact_duplicate_groups,
            "exact_duplicate_files": self.exact_duplicate_files,
            "exact_duplicate_wasted_space": self.exact_duplicate_wasted_space,
            "exact_duplicate_wasted_space_formatted": self.exact_duplicate_wasted_space_formatted,
            "size_duplicate_groups": self.size_duplicate_groups,
            "size_duplicate_files": self.size_duplicate_files,
            "size_duplicate_potential_space": self.size_duplicate_potential_space,
            "size_duplicate_potential_space_formatted": self.size_duplicate_potential_space_formatted,
        }


@dataclass
class AnalysisResult:
    exact_duplicates: List[ExactDuplicateGroup] = field(default_factory=list)
    size_duplicates: List[SizeDuplicateGroup] = field(default_factory=list)
    stats: DuplicateStats = field(default_factory=DuplicateStats)

    def to_dict(self) -> Dict:
        return {
            "exact_duplicates": [g.to_dict() for g in self.exact_duplicates],
            "size_duplicates": [g.to_dict() for g in self.size_duplicates],
            "stats": self.stats.to_dict(),
        }


"""
DTO for scan parameters with built-in validation.
Interface-agnostic, used by both the CLI and the request API.
"""

@dataclass
class ScanParams:
    """Parameters for a scan with validation."""
    root_dir: str
    min_size_bytes: int
    extensions: List[str] = field(default_factory=list)
    ignored_paths: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir or not self.root_dir.strip():
            raise ValueError("Base path is required")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        # Normalize extensions: lowercase, no leading dot
        normalized = []
        for ext in self.extensions:
            ext = normalize_extension(ext)
            if ext and ext not in normalized:
                normalized.append(ext)
        self.extensions = normalized

        self.ignored_paths = [p.strip() for p in self.ignored_paths if p and p.strip()]

    def to_policy(self) -> FilterPolicy:
        return FilterPolicy.create(
            ignored_paths=self.ignored_paths,
            extensions=self.extensions,
            min_size=self.min_size_bytes,
        )

    @staticmethod
    def from_config(
            root_dir: str,
            config: "AppConfig",
            ignored_paths: Optional[List[str]] = None,
            extensions: Optional[List[str]] = None,
            min_size_bytes: Optional[int] = None,
    ) -> "ScanParams":
        """
        Factory method filling unset values from the loaded configuration.
        Explicit arguments win over configuration values.
        """
        return ScanParams(
            root_dir=root_dir,
            min_size_bytes=config.min_file_size if min_size_bytes is None else min_size_bytes,
            extensions=list(config.supported_extensions if extensions is None else extensions),
            ignored_paths=list(config.default_paths_to_ignore if ignored_paths is None else ignored_paths),
        )
