"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

api.py

Request-level facade over the detection tool.

`DuplicateDetectorApi` maps an action name plus a parameter mapping to a
JSON-serialisable response:
- scan          (scan a directory and analyze duplicates)
- test_path     (check that a path exists and is readable)
- open_file     (launch the configured viewer)
- get_defaults  (default paths from configuration)
- delete_file   (trash or permanently delete a file)

Every response carries `success` and `timestamp`; failures carry `error`.
"""
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from mediadupes.commands import ScanCommand
from mediadupes.config import AppConfig
from mediadupes.core.errors import MediaDupesError
from mediadupes.core.models import ScanParams
from mediadupes.services.file_service import FileService
from mediadupes.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

DEFAULT_ACTION = "scan"


def parse_ignored_paths(value: Union[str, List[str], None]) -> List[str]:
    """Accepts a list or a newline-separated string; trims and drops blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split("\n")
    return [p.strip() for p in value if p and p.strip()]


class DuplicateDetectorApi:
    """
    Dispatches actions to the scan command and file service, and shapes the results.
    """

    def __init__(self, config: Optional[AppConfig] = None, command: Optional[ScanCommand] = None):
        self.config = config or AppConfig()
        self._command = command or ScanCommand()
        self._actions: Dict[str, Callable[[Mapping[str, Any]], Dict]] = {
            "scan": self.scan,
            "test_path": self.test_path,
            "open_file": self.open_file,
            "get_defaults": self.get_defaults,
            "delete_file": self.delete_file,
        }

    @property
    def actions(self) -> List[str]:
        return list(self._actions)

    def handle_request(self, action: Optional[str], params: Optional[Mapping[str, Any]] = None) -> Dict:
        """Run one action; expected failures become `success: false` responses."""
        action = action or DEFAULT_ACTION
        params = params or {}
        try:
            handler = self._actions.get(action)
            if handler is None:
                raise ValueError(f"Invalid action: {action}")
            return handler(params)
        except (MediaDupesError, ValueError, OSError, RuntimeError) as e:
            logger.debug(f"Action {action} failed: {e}")
            return self._failure(str(e))

    def scan(self, params: Mapping[str, Any]) -> Dict:
        base_path = str(params.get("base_path") or "").strip()
        if not base_path:
            raise ValueError("Configuration errors: Base path is required")

        # Omitted entirely -> configured defaults; given (even empty) -> used as is
        ignored_paths = None
        if "ignored_paths" in params:
            ignored_paths = parse_ignored_paths(params["ignored_paths"])
        scan_params = ScanParams.from_config(base_path, self.config, ignored_paths=ignored_paths)

        report = self._command.execute(scan_params)
        return report.to_dict()

    def test_path(self, params: Mapping[str, Any]) -> Dict:
        test_path = str(params.get("test_path") or "").strip()
        if not test_path:
            raise ValueError("Test path is required")

        probe = FileService.probe_path(test_path)
        return self._success(result=probe.to_dict())

    def open_file(self, params: Mapping[str, Any]) -> Dict:
        file_path = self._require_file_path(params)
        viewer = FileService.open_file(file_path, self.config)
        return self._success(
            message=f"Opened file in {viewer}",
            file=file_path,
            viewer=viewer,
        )

    def get_defaults(self, params: Mapping[str, Any]) -> Dict:
        return self._success(defaults={
            "remote_drive_path": self.config.default_remote_drive_path,
            "paths_to_ignore": "\n".join(self.config.default_paths_to_ignore),
        })

    def delete_file(self, params: Mapping[str, Any]) -> Dict:
        file_path = self._require_file_path(params)
        permanent = bool(params.get("permanent", False))
        FileService.delete_file(file_path, permanent=permanent)
        return self._success(
            message="File deleted successfully" if permanent else "File moved to trash",
            file=file_path,
        )

    @staticmethod
    def _require_file_path(params: Mapping[str, Any]) -> str:
        file_path = str(params.get("file_path") or "").strip()
        if not file_path:
            raise ValueError("File path is required")
        return file_path

    @staticmethod
    def _success(**payload) -> Dict:
        return {"success": True, **payload, "timestamp": ConvertUtils.now_to_human()}

    @staticmethod
    def _failure(message: str) -> Dict:
        return {"success": False, "error": message, "timestamp": ConvertUtils.now_to_human()}
