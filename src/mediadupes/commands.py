"""
Scan command orchestrator.
This is the single source of truth for the scan-and-detect workflow, used by
both the request API and the CLI.
"""
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from mediadupes.core.analyzer import DuplicateAnalyzerImpl
from mediadupes.core.interfaces import DuplicateAnalyzer
from mediadupes.core.models import AnalysisResult, FileRecord, ScanParams, ScanStats
from mediadupes.core.scanner import FileScannerImpl
from mediadupes.utils.convert_utils import ConvertUtils


@dataclass
class ScanReport:
    """Everything one scan produced, ready to print or serialise."""
    params: ScanParams
    scan_stats: ScanStats
    analysis: AnalysisResult
    execution_time: float
    files: List[FileRecord] = field(default_factory=list)

    def to_dict(self) -> Dict:
        policy = self.params.to_policy()
        return {
            "success": True,
            "scan_stats": self.scan_stats.to_dict(),
            "duplicates": self.analysis.to_dict(),
            "execution_time": round(self.execution_time, 2),
            "timestamp": ConvertUtils.now_to_human(),
            "config": {
                "base_path": self.params.root_dir,
                "ignored_paths": list(policy.ignored_prefixes),
                "min_file_size": self.params.min_size_bytes,
                "supported_extensions": list(self.params.extensions),
            },
        }


class ScanCommand:
    """
    Orchestrates the detection workflow:
    1. Build an immutable FilterPolicy from the parameters
    2. Scan the root directory
    3. Analyze the scanned files for duplicates

    Usage:
        params = ScanParams.from_config("/mnt/photos", config)
        report = ScanCommand().execute(params)
        print(report.analysis.stats.exact_duplicate_wasted_space_formatted)
    """

    def __init__(self, analyzer: Optional[DuplicateAnalyzer] = None):
        self._analyzer = analyzer or DuplicateAnalyzerImpl()

    def execute(self, params: ScanParams) -> ScanReport:
        """
        Run scan and analysis with the given parameters.

        Raises:
            InvalidRootError: if the root directory cannot be scanned
        """
        start_time = time.time()

        scanner = FileScannerImpl(root_dir=params.root_dir, policy=params.to_policy())
        files = scanner.scan()
        analysis = self._analyzer.analyze(files)

        return ScanReport(
            params=params,
            scan_stats=scanner.get_stats(),
            analysis=analysis,
            execution_time=time.time() - start_time,
            files=files,
        )
