"""
Tests for file service: viewer launching, deletion and path probing.
Viewer processes and the trash are mocked; no real application is started.
"""
import os
import subprocess
import pytest
from unittest import mock

from mediadupes.config import AppConfig
from mediadupes.services import file_service
from mediadupes.services.file_service import FileService
from conftest import write_sized

VIEWERS = AppConfig(image_viewer="xviewer", video_viewer="celluloid", video_extensions=("mp4",))


class TestOpenFile:
    """Viewer selection by extension."""

    def test_images_open_in_image_viewer(self, tmp_path):
        photo = write_sized(tmp_path / "photo.JPG", 10)

        with mock.patch.object(subprocess, "Popen") as popen:
            viewer = FileService.open_file(str(photo), VIEWERS)

        assert viewer == "Xviewer"
        assert popen.call_args.args[0] == ["xviewer", str(photo)]

    def test_videos_open_in_video_viewer(self, tmp_path):
        clip = write_sized(tmp_path / "clip.MP4", 10)

        with mock.patch.object(subprocess, "Popen") as popen:
            viewer = FileService.open_file(str(clip), VIEWERS)

        assert viewer == "Celluloid"
        assert popen.call_args.args[0] == ["celluloid", str(clip)]

    def test_missing_viewer_program_raises_runtime_error(self, tmp_path):
        photo = write_sized(tmp_path / "photo.jpg", 10)

        with mock.patch.object(subprocess, "Popen", side_effect=FileNotFoundError("xviewer")):
            with pytest.raises(RuntimeError, match="Failed to launch xviewer"):
                FileService.open_file(str(photo), VIEWERS)

    def test_unconfigured_viewer_uses_system_default(self, tmp_path):
        photo = write_sized(tmp_path / "photo.jpg", 10)

        with mock.patch.object(FileService, "_open_default") as open_default:
            viewer = FileService.open_file(str(photo), AppConfig())

        assert viewer == "System default"
        open_default.assert_called_once()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="File does not exist"):
            FileService.open_file(str(tmp_path / "nope.jpg"), VIEWERS)


class TestDeleteFile:
    """Deletion goes to trash by default."""

    def test_moves_file_to_trash(self, tmp_path):
        photo = write_sized(tmp_path / "photo.jpg", 10)

        with mock.patch.object(file_service, "send2trash") as trash:
            FileService.delete_file(str(photo))

        trash.assert_called_once_with(str(photo.resolve()))

    def test_permanent_delete_unlinks(self, tmp_path):
        photo = write_sized(tmp_path / "photo.jpg", 10)

        with mock.patch.object(file_service, "send2trash") as trash:
            FileService.delete_file(str(photo), permanent=True)

        assert not photo.exists()
        trash.assert_not_called()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="File does not exist"):
            FileService.delete_file(str(tmp_path / "nope.jpg"))

    def test_unwritable_directory_raises(self, tmp_path, monkeypatch):
        photo = write_sized(tmp_path / "photo.jpg", 10)
        original_access = os.access

        def mocked_access(path, mode, *args, **kwargs):
            if str(path) == str(tmp_path) and mode == os.W_OK:
                return False
            return original_access(path, mode, *args, **kwargs)

        monkeypatch.setattr(os, "access", mocked_access)

        with pytest.raises(PermissionError, match="not writable"):
            FileService.delete_file(str(photo))
        assert photo.exists()

    def test_trash_failure_is_wrapped(self, tmp_path):
        photo = write_sized(tmp_path / "photo.jpg", 10)

        with mock.patch.object(file_service, "send2trash", side_effect=OSError("no trash")):
            with pytest.raises(RuntimeError, match="Failed to move to trash"):
                FileService.delete_file(str(photo))


class TestProbePath:
    """Pre-scan path checks."""

    def test_probe_directory_counts_entries(self, tmp_path):
        write_sized(tmp_path / "a.jpg", 1)
        write_sized(tmp_path / "b.jpg", 1)
        (tmp_path / "sub").mkdir()

        probe = FileService.probe_path(str(tmp_path))

        assert probe.exists and probe.is_directory and probe.is_readable
        assert probe.sample_accessible is True
        assert probe.file_count == 2
        assert probe.dir_count == 1

    def test_probe_stops_after_limit(self, tmp_path):
        for i in range(10):
            write_sized(tmp_path / f"{i}.jpg", 1)

        probe = FileService.probe_path(str(tmp_path), limit=3)

        assert probe.file_count + probe.dir_count == 4

    def test_probe_missing_path(self, tmp_path):
        probe = FileService.probe_path(str(tmp_path / "missing"))

        assert probe.to_dict() == {
            "path": str(tmp_path / "missing"),
            "exists": False,
            "is_directory": False,
            "is_readable": False,
            "is_writable": False,
        }

    def test_probe_listing_failure(self, tmp_path, monkeypatch):
        def failing_scandir(path="."):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(os, "scandir", failing_scandir)

        probe = FileService.probe_path(str(tmp_path))

        assert probe.sample_accessible is False
        assert "Permission denied" in probe.error
        assert probe.to_dict()["sample_accessible"] is False
