"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/analyzer.py
Groups scanned files into exact duplicates (same filename and size) and
size-only duplicates (same size, different filenames), and totals the space
they occupy.
"""

from typing import List, Dict, Any, Callable
from collections import defaultdict
import logging

from mediadupes.core.interfaces import DuplicateAnalyzer
from mediadupes.core.models import (
    FileRecord, ExactDuplicateGroup, SizeDuplicateGroup, DuplicateStats, AnalysisResult
)

logger = logging.getLogger(__name__)


class DuplicateAnalyzerImpl(DuplicateAnalyzer):
    """
    Stateless analyzer: every call recomputes groups from the given list.

    Ordering is deterministic. Files inside a group keep input order, groups
    are sorted by descending size, and groups of equal size keep the order in
    which their key was first seen.
    """

    def analyze(self, files: List[FileRecord]) -> AnalysisResult:
        exact = self.find_exact_duplicates(files)
        size_only = self.find_size_duplicates(files, exact)
        stats = self.compute_stats(exact, size_only)

        logger.debug(
            f"Analyzed {len(files)} files: {stats.exact_duplicate_groups} exact groups, "
            f"{stats.size_duplicate_groups} size-only groups"
        )
        return AnalysisResult(exact_duplicates=exact, size_duplicates=size_only, stats=stats)

    def find_exact_duplicates(self, files: List[FileRecord]) -> List[ExactDuplicateGroup]:
        """Groups files by (filename, size)."""
        partitions = self._group_by(files, lambda f: (f.filename, f.size))
        groups = [
            ExactDuplicateGroup(filename=filename, size=size, files=group)
            for (filename, size), group in partitions.items()
        ]
        return self._sort_by_size_desc(groups)

    def find_size_duplicates(
            self,
            files: List[FileRecord],
            exact_groups: List[ExactDuplicateGroup]
    ) -> List[SizeDuplicateGroup]:
        """
        Groups files by size alone, keeping groups with at least two distinct filenames.

        A size already used by any exact group is dropped entirely, whether or
        not the filenames overlap.
        """
        claimed_sizes = {g.size for g in exact_groups}
        groups = []
        for size, group in self._group_by(files, lambda f: f.size).items():
            if len({f.filename for f in group}) < 2:
                continue
            if size in claimed_sizes:
                logger.debug(f"Size {size} already claimed by an exact duplicate group")
                continue
            groups.append(SizeDuplicateGroup(size=size, files=group))
        return self._sort_by_size_desc(groups)

    @staticmethod
    def compute_stats(
            exact_groups: List[ExactDuplicateGroup],
            size_groups: List[SizeDuplicateGroup]
    ) -> DuplicateStats:
        return DuplicateStats(
            exact_duplicate_groups=len(exact_groups),
            exact_duplicate_files=sum(g.count for g in exact_groups),
            exact_duplicate_wasted_space=sum(g.wasted_space for g in exact_groups),
            size_duplicate_groups=len(size_groups),
            size_duplicate_files=sum(g.count for g in size_groups),
            size_duplicate_potential_space=sum(g.potential_space for g in size_groups),
        )

    @staticmethod
    def _group_by(files: List[FileRecord], key_func: Callable[[FileRecord], Any]) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group files by any computed key.
        Args:
            files: List of files to group
            key_func: Function that computes a hashable key from a FileRecord
        Returns:
            Dict[key, List[FileRecord]] with groups of 2+ files, in first-seen key order
        """
        groups = defaultdict(list)
        for file in files:
            groups[key_func(file)].append(file)

        return {key: group for key, group in groups.items() if len(group) >= 2}

    @staticmethod
    def _sort_by_size_desc(groups: List) -> List:
        # sorted() is stable, so equal sizes keep first-seen order
        return sorted(groups, key=lambda g: g.size, reverse=True)
