"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File operations used around the detection core: opening a file in a viewer,
deleting (trash or permanent), and probing a path before a scan.
"""
import os
import sys
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from send2trash import send2trash

from mediadupes.config import AppConfig
from mediadupes.core.models import split_extension

logger = logging.getLogger(__name__)

PROBE_ENTRY_LIMIT = 1000


@dataclass
class PathProbe:
    """Result of checking a path before scanning it."""
    path: str
    exists: bool
    is_directory: bool
    is_readable: bool
    is_writable: bool
    file_count: Optional[int] = None
    dir_count: Optional[int] = None
    sample_accessible: Optional[bool] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        result = {
            "path": self.path,
            "exists": self.exists,
            "is_directory": self.is_directory,
            "is_readable": self.is_readable,
            "is_writable": self.is_writable,
        }
        if self.sample_accessible is not None:
            result["sample_accessible"] = self.sample_accessible
        if self.file_count is not None:
            result["file_count"] = self.file_count
            result["dir_count"] = self.dir_count
        if self.error is not None:
            result["error"] = self.error
        return result


class FileService:
    """
    Cross-platform file operations.
    Uses configured viewer programs when set, system tools otherwise.
    """

    @staticmethod
    def open_file(file_path: str, config: Optional[AppConfig] = None) -> str:
        """
        Opens a file in the configured image or video viewer.
        Returns the name of the viewer that was launched.
        """
        config = config or AppConfig()
        path = Path(file_path)

        if not path.is_file():
            raise FileNotFoundError(f"File does not exist: {file_path}")
        if not os.access(path, os.R_OK):
            raise PermissionError(f"File is not readable: {file_path}")

        _, ext = split_extension(path.name)
        viewer = config.video_viewer if ext in config.video_extensions else config.image_viewer

        if not viewer:
            FileService._open_default(path)
            return "System default"

        try:
            subprocess.Popen(
                [viewer, str(path)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                env=FileService._get_clean_env(),
                start_new_session=True,
            )
        except OSError as e:
            raise RuntimeError(f"Failed to launch {viewer}: {e}") from e

        logger.debug(f"Opened {path} with {viewer}")
        return viewer.capitalize()

    @staticmethod
    def _open_default(path: Path):
        """Opens a file with the system default application."""
        try:
            if sys.platform == 'win32':
                os.startfile(str(path))
            elif sys.platform == 'darwin':
                subprocess.Popen(['open', str(path)])
            else:
                FileService._open_linux(path)
        except OSError as e:
            raise RuntimeError(f"Failed to open file: {e}") from e

    @staticmethod
    def _open_linux(path: Path):
        """Linux: Tries gio, falls back to xdg-open."""
        env = FileService._get_clean_env()

        try:
            subprocess.run(['gio', 'open', str(path)], env=env, timeout=5)
            return
        except (FileNotFoundError, subprocess.TimeoutExpired):
            pass  # Fallback to xdg-open

        try:
            subprocess.run(['xdg-open', str(path)], env=env, timeout=5)
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            raise RuntimeError("Cannot open file: no suitable application found") from e

    @staticmethod
    def delete_file(file_path: str, permanent: bool = False) -> None:
        """
        Deletes a file. By default it goes to the system trash;
        with permanent=True it is unlinked.
        """
        path = Path(file_path)

        if not path.is_file():
            raise FileNotFoundError(f"File does not exist: {file_path}")
        if not os.access(path.parent, os.W_OK):
            raise PermissionError(f"Directory is not writable: {path.parent}")

        if not permanent:
            FileService.move_to_trash(file_path)
            return

        try:
            path.unlink()
        except OSError as e:
            raise RuntimeError(f"Failed to delete file: {file_path}: {e}") from e
        logger.debug(f"Deleted {file_path}")

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
        logger.debug(f"Moved {path} to trash")

    @staticmethod
    def probe_path(path_str: str, limit: int = PROBE_ENTRY_LIMIT) -> PathProbe:
        """
        Reports existence and permissions of a path. For readable directories
        also counts direct children, stopping once more than `limit` entries were seen.
        """
        path = Path(path_str)
        probe = PathProbe(
            path=path_str,
            exists=path.exists(),
            is_directory=path.is_dir(),
            is_readable=os.access(path, os.R_OK),
            is_writable=os.access(path, os.W_OK),
        )
        if not (probe.is_directory and probe.is_readable):
            return probe

        file_count = dir_count = 0
        try:
            with os.scandir(path) as it:
                for entry in it:
                    if entry.is_dir():
                        dir_count += 1
                    else:
                        file_count += 1
                    if file_count + dir_count > limit:
                        break
        except OSError as e:
            probe.sample_accessible = False
            probe.error = str(e)
            return probe

        probe.file_count = file_count
        probe.dir_count = dir_count
        probe.sample_accessible = True
        return probe

    @staticmethod
    def _get_clean_env():
        """
        Returns a clean environment for spawning system applications.
        Removes PyInstaller's temporary library paths from LD_LIBRARY_PATH.
        """
        env = os.environ.copy()

        if getattr(sys, 'frozen', False) and sys.platform.startswith('linux'):
            ld_path = env.get('LD_LIBRARY_PATH', '')
            if ld_path:
                paths = ld_path.split(':')
                clean_paths = [
                    p for p in paths
                    if not p.startswith('/tmp/_MEI')
                       and not p.startswith(os.path.dirname(sys.executable))
                ]
                env['LD_LIBRARY_PATH'] = ':'.join(clean_paths)

        return env
