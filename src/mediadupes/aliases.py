COMMAND_ACTIONS = {
    "scan": "scan",
    "test-path": "test_path",
    "open": "open_file",
    "defaults": "get_defaults",
    "delete": "delete_file",
}

SCAN_HELP_TEXT = (
    "Scan a directory and report likely duplicates:\n"
    "  exact : same filename and same size\n"
    "  size  : same size, different filenames (sizes already taken by an exact group are skipped)\n"
    "Example    : %(prog)s -i /mnt/photos -e /mnt/photos/tmp -m 500K -x jpg png\n"
)

IGNORE_HELP_TEXT = (
    "Paths to ignore (space separated). Matching is a plain prefix test:\n"
    "  /mnt/photos/tmp also ignores /mnt/photos/tmp2\n"
)

EPILOG_TEXT = """
Examples:
  Basic usage - find duplicates under the configured default path
  %(prog)s scan

  Scan a folder, ignore a subfolder, report as JSON
  %(prog)s scan -i /mnt/photos -e /mnt/photos/tmp --json

  Only large videos
  %(prog)s scan -i /mnt/photos -x mp4 -m 50MB

  Check a path before scanning it
  %(prog)s test-path /mnt/photos

  Open a file in the configured viewer, then move it to trash
  %(prog)s open /mnt/photos/a/photo.jpg
  %(prog)s delete /mnt/photos/b/photo.jpg

Configuration is read from --config, $MEDIADUPES_CONFIG or ~/.config/mediadupes/config.toml
"""
