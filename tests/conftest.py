"""
Shared fixtures for scanner and analyzer tests.
Creates isolated temporary directories with controlled media files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'mediadupes' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from mediadupes.core.models import FileRecord, split_extension

MIN_SIZE = 102400


def write_sized(path: Path, size: int) -> Path:
    """Creates a file of exactly `size` bytes (sparse where the OS allows it)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.truncate(size)
    return path


def make_record(path: str, size: int, modified_time: float = 0.0) -> FileRecord:
    """In-memory FileRecord for analyzer tests (no filesystem access)."""
    filename = path.replace("\\", "/").rsplit("/", 1)[-1]
    base_name, extension = split_extension(filename)
    return FileRecord(
        filename=filename,
        path=path,
        size=size,
        base_name=base_name,
        extension=extension,
        modified_time=modified_time,
    )


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def media_tree(temp_dir) -> Dict[str, Path]:
    """
    Creates a controlled media tree:
    - photo.jpg (500000 B) in a/ and b/           -> exact duplicates
    - x.jpg and y.png (300000 B)                  -> size duplicates
    - clip.MP4 (200000 B)                         -> unique, upper-case extension
    - small.jpg (50000 B)                         -> below minimum size
    - notes.txt (200000 B)                        -> extension not allowed
    - tmp/photo.jpg (500000 B)                    -> under an ignored prefix in some tests
    """
    files = {
        "photo_a": write_sized(temp_dir / "a" / "photo.jpg", 500000),
        "photo_b": write_sized(temp_dir / "b" / "photo.jpg", 500000),
        "x": write_sized(temp_dir / "c" / "x.jpg", 300000),
        "y": write_sized(temp_dir / "d" / "y.png", 300000),
        "clip": write_sized(temp_dir / "clip.MP4", 200000),
        "small": write_sized(temp_dir / "small.jpg", 50000),
        "notes": write_sized(temp_dir / "notes.txt", 200000),
        "tmp_photo": write_sized(temp_dir / "tmp" / "photo.jpg", 500000),
    }
    return files
