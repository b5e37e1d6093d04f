"""
Tests for the command line front-end.
Runs CLIApplication.run() with explicit argv and checks output and exit codes.
"""
import json
import pytest
from unittest import mock

from mediadupes.cli import CLIApplication
from mediadupes.config import CONFIG_ENV_VAR
from mediadupes.services.file_service import FileService
from conftest import write_sized


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


def run_cli(argv):
    CLIApplication().run(argv)


class TestArgumentParsing:
    def test_scan_arguments(self):
        args = CLIApplication.parse_args([
            "scan", "-i", "/photos", "-e", "/photos/tmp", "/photos/cache",
            "-x", "jpg", "png", "-m", "1MB", "--json",
        ])

        assert args.command == "scan"
        assert args.input == "/photos"
        assert args.ignored_paths == ["/photos/tmp", "/photos/cache"]
        assert args.extensions == ["jpg", "png"]
        assert args.min_size == "1MB"
        assert args.json_output is True

    def test_delete_arguments(self):
        args = CLIApplication.parse_args(["delete", "/x.jpg", "--permanent", "--force"])

        assert args.path == "/x.jpg"
        assert args.permanent and args.force

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args([])

    def test_cli_overrides_reach_config(self):
        app = CLIApplication()
        args = app.parse_args(["scan", "-i", "/x", "-x", ".JPG", "-m", "1KB"])

        config = app.resolve_config(args)

        assert config.supported_extensions == ("jpg",)
        assert config.min_file_size == 1024

    def test_invalid_min_size_exits(self, capsys):
        app = CLIApplication()
        args = app.parse_args(["scan", "-i", "/x", "-m", "huge"])

        with pytest.raises(SystemExit) as exc:
            app.resolve_config(args)

        assert exc.value.code == 1
        assert "Invalid size format" in capsys.readouterr().err


class TestScanCommand:
    def test_json_output(self, temp_dir, media_tree, capsys):
        run_cli(["scan", "-i", str(temp_dir), "-e", str(temp_dir / "tmp"), "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        assert data["duplicates"]["stats"]["exact_duplicate_groups"] == 1
        assert data["duplicates"]["stats"]["size_duplicate_groups"] == 1

    def test_text_output(self, temp_dir, media_tree, capsys):
        run_cli(["scan", "-i", str(temp_dir), "-e", str(temp_dir / "tmp")])

        out = capsys.readouterr().out
        assert f"Scanning directory: {temp_dir}" in out
        assert "Scanned 5 files" in out
        assert "Exact duplicates (same name and size): 1 groups, 2 files" in out
        assert str(media_tree["photo_a"]) in out
        assert "Wasted space (exact duplicates): 488.28 KB" in out
        assert "Potential space (size duplicates): 292.97 KB" in out

    def test_no_duplicates_message(self, temp_dir, capsys):
        write_sized(temp_dir / "only.jpg", 200000)

        run_cli(["scan", "-i", str(temp_dir)])

        assert "No duplicate groups found." in capsys.readouterr().out

    def test_quiet_prints_nothing(self, temp_dir, media_tree, capsys):
        run_cli(["scan", "-i", str(temp_dir), "-q"])

        assert capsys.readouterr().out == ""

    def test_missing_directory_exits_with_error(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as exc:
            run_cli(["scan", "-i", str(temp_dir / "missing")])

        assert exc.value.code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_missing_directory_json_exits_with_error(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as exc:
            run_cli(["scan", "-i", str(temp_dir / "missing"), "--json"])

        assert exc.value.code == 1
        assert json.loads(capsys.readouterr().out)["success"] is False

    def test_default_path_from_config(self, temp_dir, media_tree, tmp_path, capsys):
        config = tmp_path / "config.toml"
        config.write_text(
            f'[default_paths]\ndefault_remote_drive_path = "{temp_dir}"\n'
            f'default_paths_to_ignore = ["{temp_dir / "tmp"}"]\n'
        )

        run_cli(["scan", "--config", str(config), "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data["config"]["base_path"] == str(temp_dir)
        assert data["scan_stats"]["total_files"] == 5

    def test_broken_config_exits(self, tmp_path, capsys):
        config = tmp_path / "config.toml"
        config.write_text("[detector\n")

        with pytest.raises(SystemExit) as exc:
            run_cli(["defaults", "--config", str(config)])

        assert exc.value.code == 1
        assert "Configuration error" in capsys.readouterr().err


class TestOtherCommands:
    def test_defaults(self, tmp_path, capsys):
        config = tmp_path / "config.toml"
        config.write_text(
            '[default_paths]\ndefault_remote_drive_path = "/mnt/drive"\n'
            'default_paths_to_ignore = ["/mnt/drive/tmp"]\n'
        )

        run_cli(["defaults", "-c", str(config)])

        out = capsys.readouterr().out
        assert "Default path: /mnt/drive" in out
        assert "   /mnt/drive/tmp" in out

    def test_test_path(self, temp_dir, media_tree, capsys):
        run_cli(["test-path", str(temp_dir)])

        out = capsys.readouterr().out
        assert "✅ exists" in out
        assert "✅ is directory" in out

    def test_delete_with_force(self, temp_dir, capsys):
        photo = write_sized(temp_dir / "photo.jpg", 10)

        with mock.patch.object(FileService, "move_to_trash") as trash:
            run_cli(["delete", str(photo), "--force"])

        trash.assert_called_once_with(str(photo))
        assert "File moved to trash" in capsys.readouterr().out

    def test_delete_without_tty_refuses(self, temp_dir, capsys):
        photo = write_sized(temp_dir / "photo.jpg", 10)

        with pytest.raises(SystemExit) as exc:
            run_cli(["delete", str(photo)])

        assert exc.value.code == 1
        assert "--force" in capsys.readouterr().err
        assert photo.exists()

    def test_open_failure_exits(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as exc:
            run_cli(["open", str(temp_dir / "missing.jpg")])

        assert exc.value.code == 1
        assert "File does not exist" in capsys.readouterr().err
