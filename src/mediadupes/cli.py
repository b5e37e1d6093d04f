#!/usr/bin/env python3
"""
mediadupes CLI: command line front-end for media duplicate detection.
Every subcommand is dispatched through the same request API that produces the
JSON responses; text mode renders those responses for a terminal.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import dataclasses
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, NoReturn

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from mediadupes.api import DuplicateDetectorApi
from mediadupes.config import AppConfig, load_config
from mediadupes.core.errors import ConfigError
from mediadupes.utils.convert_utils import ConvertUtils
from mediadupes.aliases import (
    COMMAND_ACTIONS, SCAN_HELP_TEXT, IGNORE_HELP_TEXT, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.verbose: bool = False
        self.quiet: bool = False
        self.json_output: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument(
            "--config", "-c",
            type=str,
            default=None,
            metavar='PATH',
            help="TOML configuration file"
        )
        common.add_argument(
            "--json",
            action="store_true",
            dest="json_output",
            help="Print the raw JSON response"
        )
        common.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        common.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show debug logging and timings"
        )

        parser = argparse.ArgumentParser(
            prog="mediadupes",
            description="mediadupes: find duplicate photos and videos by filename and size",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )
        subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

        scan = subparsers.add_parser(
            "scan", parents=[common],
            help="Scan a directory for duplicates",
            description=SCAN_HELP_TEXT,
            formatter_class=argparse.RawTextHelpFormatter
        )
        scan.add_argument(
            "--input", "-i",
            type=str,
            default=None,
            help="Directory to scan. Default: default_remote_drive_path from config"
        )
        scan.add_argument(
            "--ignore", "-e",
            nargs="+",
            default=None,
            type=str,
            metavar='',
            dest="ignored_paths",
            help=IGNORE_HELP_TEXT
        )
        scan.add_argument(
            "--extensions", "-x",
            nargs="+",
            default=None,
            type=str,
            metavar='',
            help="File extensions (space separated) to include (e.g., jpg png). Default: from config"
        )
        scan.add_argument(
            "--min-size", "-m",
            default=None,
            type=str,
            metavar='',
            help="Minimum file size (e.g., 100KB, 1MB). Default: from config (100KB)"
        )

        test_path = subparsers.add_parser("test-path", parents=[common], help="Check that a path can be scanned")
        test_path.add_argument("path", type=str, help="Path to check")

        open_file = subparsers.add_parser("open", parents=[common], help="Open a file in the configured viewer")
        open_file.add_argument("path", type=str, help="File to open")

        subparsers.add_parser("defaults", parents=[common], help="Show default paths from configuration")

        delete = subparsers.add_parser("delete", parents=[common], help="Move a file to trash")
        delete.add_argument("path", type=str, help="File to delete")
        delete.add_argument(
            "--permanent",
            action="store_true",
            help="Delete permanently instead of moving to trash"
        )
        delete.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt (for automation/scripts)"
        )

        return parser.parse_args(args)

    def resolve_config(self, args: argparse.Namespace) -> AppConfig:
        """Load configuration and apply scan overrides from the command line."""
        try:
            config = load_config(args.config)
        except ConfigError as e:
            self.error_exit(f"Configuration error: {e}")

        if args.command != "scan":
            return config

        overrides: Dict[str, Any] = {}
        if args.extensions:
            overrides["supported_extensions"] = tuple(
                ext.strip().lower().lstrip(".") for ext in args.extensions if ext.strip()
            )
        if args.min_size is not None:
            try:
                overrides["min_file_size"] = ConvertUtils.human_to_bytes(args.min_size)
            except ValueError as e:
                self.error_exit(f"Invalid size format: {e}")
        return dataclasses.replace(config, **overrides) if overrides else config

    def build_request(self, args: argparse.Namespace, config: AppConfig) -> Dict[str, Any]:
        """Translate parsed arguments into request parameters."""
        if args.command == "scan":
            request: Dict[str, Any] = {"base_path": args.input or config.default_remote_drive_path}
            if args.ignored_paths is not None:
                request["ignored_paths"] = args.ignored_paths
            return request
        if args.command == "test-path":
            return {"test_path": args.path}
        if args.command in ("open", "delete"):
            request = {"file_path": args.path}
            if args.command == "delete":
                request["permanent"] = args.permanent
            return request
        return {}

    def confirm_delete(self, args: argparse.Namespace) -> bool:
        """Ask before deleting unless --force was given."""
        if args.force:
            return True

        if not sys.stdin.isatty() or not sys.stdout.isatty():
            self.error_exit(
                "Cannot request interactive confirmation in non-interactive session.\n"
                "Use --force flag to proceed without confirmation when piping output or running in scripts."
            )

        what = "permanently delete" if args.permanent else "move to trash"
        response = input(f"Are you sure you want to {what} {args.path}? [y/N]: ")
        return response.strip().lower() in ("y", "yes")

    # ---------- text rendering ----------

    def output_scan(self, response: Dict) -> None:
        stats = response["scan_stats"]
        duplicates = response["duplicates"]
        dup_stats = duplicates["stats"]

        print(
            f"Scanned {stats['total_files']} files "
            f"({stats['total_size_formatted']}) in {response['execution_time']:.2f}s"
        )
        if stats["skipped_directories"] or stats["skipped_files"]:
            self.warning(
                f"Skipped {stats['skipped_directories']} unreadable directories "
                f"and {stats['skipped_files']} unreadable files"
            )
        if self.verbose:
            for ext, ext_stats in sorted(stats["extensions"].items()):
                print(f"   .{ext}: {ext_stats['count']} files, {ConvertUtils.bytes_to_human(ext_stats['size'])}")

        exact_groups = duplicates["exact_duplicates"]
        size_groups = duplicates["size_duplicates"]

        if not exact_groups and not size_groups:
            print("No duplicate groups found.")
            return

        if exact_groups:
            print(
                f"\nExact duplicates (same name and size): {dup_stats['exact_duplicate_groups']} groups, "
                f"{dup_stats['exact_duplicate_files']} files"
            )
            for idx, group in enumerate(exact_groups, 1):
                print(
                    f"\n📁 Group {idx} | {group['filename']} | Size: {group['filesize_formatted']} "
                    f"| Files: {group['count']}"
                )
                self._output_files(group["files"])

        if size_groups:
            print(
                f"\nSize duplicates (same size, different names): {dup_stats['size_duplicate_groups']} groups, "
                f"{dup_stats['size_duplicate_files']} files"
            )
            for idx, group in enumerate(size_groups, 1):
                print(
                    f"\n📁 Group {idx} | Size: {group['filesize_formatted']} | Files: {group['count']} "
                    f"| Names: {group['unique_filenames']}"
                )
                self._output_files(group["files"])

        print("\n" + "=" * 60)
        print(f"Wasted space (exact duplicates): {dup_stats['exact_duplicate_wasted_space_formatted']}")
        print(f"Potential space (size duplicates): {dup_stats['size_duplicate_potential_space_formatted']}")

    @staticmethod
    def _output_files(files: List[Dict]) -> None:
        for file in files:
            modified = ConvertUtils.timestamp_to_human(file["modified_time"])
            print(f"   {file['filepath']} [{modified}]")

    def output_response(self, command: str, response: Dict) -> None:
        """Render a successful response as text."""
        if command == "scan":
            self.output_scan(response)
        elif command == "test-path":
            result = response["result"]
            for key in ("exists", "is_directory", "is_readable", "is_writable"):
                mark = "✅" if result[key] else "❌"
                print(f"{mark} {key.replace('_', ' ')}")
            if result.get("sample_accessible"):
                print(f"Entries: {result['file_count']} files, {result['dir_count']} directories")
            elif "error" in result:
                self.warning(f"Cannot list directory: {result['error']}")
        elif command == "defaults":
            defaults = response["defaults"]
            print(f"Default path: {defaults['remote_drive_path'] or '(not set)'}")
            print("Ignored paths:")
            for path in filter(None, defaults["paths_to_ignore"].split("\n")):
                print(f"   {path}")
        else:
            print(f"✅ {response['message']}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.json_output = args.json_output

        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        elif self.quiet:
            logging.getLogger().setLevel(logging.ERROR)

        config = self.resolve_config(args)
        request = self.build_request(args, config)

        if args.command == "scan" and not self.quiet and not self.json_output:
            print(f"Scanning directory: {request['base_path'] or '(not set)'}")

        if args.command == "delete" and not self.confirm_delete(args):
            print("Deletion cancelled by user.")
            return

        api = DuplicateDetectorApi(config)
        response = api.handle_request(COMMAND_ACTIONS[args.command], request)

        if self.json_output:
            print(json.dumps(response, indent=4, ensure_ascii=False))
            if not response["success"]:
                sys.exit(1)
            return

        if not response["success"]:
            self.error_exit(response["error"])
        if not self.quiet:
            self.output_response(args.command, response)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
