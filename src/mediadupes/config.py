"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

config.py
Application configuration loaded from a TOML file.

Lookup order:
1. explicit path (``--config``)
2. ``MEDIADUPES_CONFIG`` environment variable
3. ``~/.config/mediadupes/config.toml``

A missing file is not an error: built-in defaults are used instead.
"""
import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11: pip install tomli

from mediadupes.core.errors import ConfigError
from mediadupes.core.models import normalize_extension
from mediadupes.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MEDIADUPES_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/mediadupes/config.toml")

DEFAULT_EXTENSIONS = ("jpg", "jpeg", "png", "mp4")
DEFAULT_MIN_FILE_SIZE = 102400  # 100KB
DEFAULT_VIDEO_EXTENSIONS = ("mp4",)


@dataclass(frozen=True)
class AppConfig:
    """Immutable application settings. Passed explicitly, never global."""
    default_remote_drive_path: str = ""
    default_paths_to_ignore: Tuple[str, ...] = ()
    supported_extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    min_file_size: int = DEFAULT_MIN_FILE_SIZE
    image_viewer: Optional[str] = None
    video_viewer: Optional[str] = None
    video_extensions: Tuple[str, ...] = DEFAULT_VIDEO_EXTENSIONS
    source: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "AppConfig":
        """
        Build a config from the parsed TOML tables.
        Raises ConfigError on wrong types or invalid values.
        """
        paths = _table(data, "default_paths")
        detector = _table(data, "detector")
        viewers = _table(data, "viewers")

        min_size = detector.get("min_file_size", DEFAULT_MIN_FILE_SIZE)
        if isinstance(min_size, str):
            try:
                min_size = ConvertUtils.human_to_bytes(min_size)
            except ValueError as e:
                raise ConfigError(f"detector.min_file_size: {e}") from e
        elif isinstance(min_size, bool) or not isinstance(min_size, int):
            raise ConfigError("detector.min_file_size must be an integer or a size string")
        if min_size < 0:
            raise ConfigError("detector.min_file_size cannot be negative")

        extensions = tuple(
            ext for ext in (normalize_extension(e) for e in _str_list(detector, "supported_extensions", DEFAULT_EXTENSIONS))
            if ext
        )
        video_extensions = tuple(
            ext for ext in (normalize_extension(e) for e in _str_list(viewers, "video_extensions", DEFAULT_VIDEO_EXTENSIONS))
            if ext
        )

        return cls(
            default_remote_drive_path=_str(paths, "default_remote_drive_path", ""),
            default_paths_to_ignore=tuple(_str_list(paths, "default_paths_to_ignore", ())),
            supported_extensions=extensions,
            min_file_size=min_size,
            image_viewer=_str(viewers, "image_viewer", "") or None,
            video_viewer=_str(viewers, "video_viewer", "") or None,
            video_extensions=video_extensions,
            source=source,
        )


def _table(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _str(table: Dict[str, Any], key: str, default: str) -> str:
    value = table.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value


def _str_list(table: Dict[str, Any], key: str, default) -> list:
    value = table.get(key, list(default))
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return value


def find_config_path(explicit: Optional[str] = None) -> Optional[Path]:
    """Return the first config file candidate, or None when none exists."""
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        return path

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file from ${CONFIG_ENV_VAR} not found: {env_path}")
        return path

    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.is_file() else None


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from TOML, falling back to defaults when no file exists.

    Raises:
        ConfigError: explicit file missing, unparsable TOML or invalid values
    """
    config_path = find_config_path(path)
    if config_path is None:
        logger.debug("No config file found, using defaults")
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    logger.debug(f"Loaded config from {config_path}")
    return AppConfig.from_dict(data, source=str(config_path))
