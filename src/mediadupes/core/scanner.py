"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements media file scanning.
Features:
- Depth-first walk over an explicit stack of directory iterators
- Applies ignore-prefix, extension and minimum size filters
- Per-directory and per-file failure isolation: a failing node is logged and
  skipped, the rest of the tree is still scanned
- Returns a flat list of FileRecord plus post-scan statistics
"""

import os
import time
import logging
from pathlib import Path
from typing import List, Iterator, Union

logger = logging.getLogger(__name__)

# Local imports
from mediadupes.core.errors import (
    InvalidRootError, AccessError, DirectoryAccessError, FileAccessError
)
from mediadupes.core.interfaces import FileScanner
from mediadupes.core.models import FileRecord, FilterPolicy, ScanStats, absolute_path

_DIR = "dir"
_FILE = "file"
_SKIP = "skip"


class FileScannerImpl(FileScanner):
    """
    Scans a directory tree and keeps every regular file accepted by a FilterPolicy.

    Attributes:
        root_dir: Root directory to scan
        policy: Immutable filter policy (ignored prefixes, extensions, min size)
        errors: Recovered directory/file failures from the last scan
    """

    def __init__(self, root_dir: str, policy: FilterPolicy):
        self.root_dir = root_dir
        self.policy = policy
        self.errors: List[AccessError] = []
        self._files: List[FileRecord] = []
        self._total_scanned = 0
        self._stats = ScanStats()

    def scan(self) -> List[FileRecord]:
        """
        Walk the tree under root_dir and return the accepted files.

        Raises:
            InvalidRootError: root is empty, missing, not a directory or unreadable.
        """
        self._files = []
        self._total_scanned = 0
        self.errors = []
        self._stats = ScanStats()

        root = self._validate_root()

        logger.debug("Starting scan operation")
        logger.debug(f"Root directory: {root}")
        logger.debug(
            f"Filters: min_size={self.policy.min_size}, "
            f"extensions={sorted(self.policy.allowed_extensions)}, "
            f"ignored={list(self.policy.ignored_prefixes)}"
        )
        start_time = time.time()

        if self.policy.should_ignore(root):
            logger.debug(f"Root directory is ignored: {root}")
        else:
            self._walk(root)

        self._stats = ScanStats.from_records(
            self._files,
            total_scanned=self._total_scanned,
            skipped_directories=sum(isinstance(e, DirectoryAccessError) for e in self.errors),
            skipped_files=sum(isinstance(e, FileAccessError) for e in self.errors),
        )

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Scan completed. Found {len(self._files)} matching files.")
        return list(self._files)

    def get_stats(self) -> ScanStats:
        return self._stats

    def _validate_root(self) -> str:
        if not self.root_dir or not self.root_dir.strip():
            raise InvalidRootError(self.root_dir, "base path is required")

        root = absolute_path(self.root_dir.strip())

        if not os.path.exists(root):
            reason = "does not exist"
        elif not os.path.isdir(root):
            reason = "not a directory"
        elif not os.access(root, os.R_OK | os.X_OK):
            reason = "not readable"
        else:
            return root

        error = InvalidRootError(self.root_dir, reason)
        logger.error(str(error))
        raise error

    def _walk(self, root: str) -> None:
        """
        Pre-order depth-first traversal. Each stack frame is the remaining
        entries of one directory, so files are visited in the same order a
        recursive descent would visit them.
        """
        stack: List[Iterator[os.DirEntry]] = []
        self._enter_directory(root, stack)

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            path = entry.path
            if self.policy.should_ignore(path):
                logger.debug(f"Skipping ignored path: {path}")
                continue

            kind = self._classify(entry)
            if isinstance(kind, AccessError):
                self._record_error(kind)
            elif kind == _DIR:
                self._enter_directory(path, stack)
            elif kind == _FILE:
                result = self._process_file(entry)
                if isinstance(result, AccessError):
                    self._record_error(result)
                elif result is not None:
                    self._files.append(result)
                    self._total_scanned += 1

    def _enter_directory(self, directory: str, stack: List[Iterator[os.DirEntry]]) -> None:
        entries = self._list_directory(directory)
        if isinstance(entries, DirectoryAccessError):
            self._record_error(entries)
            return
        stack.append(iter(entries))

    @staticmethod
    def _list_directory(directory: str) -> Union[List[os.DirEntry], DirectoryAccessError]:
        """List a directory's entries sorted by name, or the error that prevented it."""
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda e: e.name)
        except OSError as e:
            return DirectoryAccessError(directory, e)

    @staticmethod
    def _classify(entry: os.DirEntry) -> Union[str, FileAccessError]:
        """
        Directory, regular file, or something to skip (devices, sockets).
        Symlinks to files count as files; symlinked directories are never entered.
        """
        try:
            if entry.is_symlink():
                if entry.is_file():
                    return _FILE
                logger.debug(f"Skipping symbolic link: {entry.path}")
                return _SKIP
            if entry.is_dir(follow_symlinks=False):
                return _DIR
            if entry.is_file(follow_symlinks=False):
                return _FILE
        except OSError as e:
            return FileAccessError(entry.path, e)
        return _SKIP

    def _process_file(self, entry: os.DirEntry) -> Union[FileRecord, FileAccessError, None]:
        """
        Build a FileRecord for a regular file that passes all filters.
        Returns:
            FileRecord if accepted, None if filtered out, FileAccessError if unreadable
        """
        if not self.policy.is_allowed_extension(entry.name):
            return None

        try:
            stat_result = Path(entry.path).stat()
        except OSError as e:
            return FileAccessError(entry.path, e)

        if not self.policy.passes_size(stat_result.st_size):
            logger.debug(f"Skipping {entry.path} (size {stat_result.st_size} bytes below minimum)")
            return None

        logger.debug(f"Accepted file: {entry.name} ({stat_result.st_size} bytes)")
        return FileRecord.from_stat(entry.path, stat_result)

    def _record_error(self, error: AccessError) -> None:
        logger.warning(str(error))
        self.errors.append(error)
