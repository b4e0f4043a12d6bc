"""
Configuration handling for StarCasa.
"""

import json
import os
import re
import logging
import sys
from dataclasses import dataclass, field, fields
from typing import Optional, List, Dict, Any

logger = logging.getLogger(__name__)


ORIENTATION_PORTRAIT = "portrait"
ORIENTATION_LANDSCAPE = "landscape"
ORIENTATION_SQUARE = "square"
ORIENTATION_ALL = "all"

ORIENTATIONS = (ORIENTATION_PORTRAIT, ORIENTATION_LANDSCAPE, ORIENTATION_SQUARE, ORIENTATION_ALL)


class ConfigError(ValueError):
    """Raised when the run configuration is unusable."""


@dataclass
class AppConfig:
    """Main application configuration."""
    input_dirs: List[str] = field(default_factory=list)
    # Orientation label -> output file, kept in the order the user declared them
    output_files: Dict[str, str] = field(default_factory=dict)
    check_exists: bool = False
    log_level: str = "INFO"
    debug_mode: bool = False
    log_dir: Optional[str] = None
    log_retention_days: int = 14
    check_for_updates: bool = True
    update_check_interval_days: int = 7
    update_check_timeout: float = 10
    github_repo: str = "mrsilver76/starcasa"


    @property
    def all_target(self) -> Optional[str]:
        """Output path for the ``all`` target, or None if it is not configured."""
        path = self.output_files.get(ORIENTATION_ALL)
        if isinstance(path, str) and path.strip():
            return path
        return None


def get_app_data_path() -> str:
    """
    Get the per-user folder StarCasa keeps its logs and caches in.

    Returns:
        Absolute path of the application data folder (not created here)
    """
    if sys.platform == "win32" and os.environ.get("APPDATA"):
        base = os.environ["APPDATA"]
    else:
        base = os.environ.get("XDG_DATA_HOME") or os.path.join(os.path.expanduser("~"), ".local", "share")
    return os.path.join(base, "StarCasa")


def _check_types(config: AppConfig) -> None:
    """Reject input directory and output file settings of the wrong shape."""
    if not isinstance(config.input_dirs, list) or not all(isinstance(d, str) for d in config.input_dirs):
        raise ConfigError("input_dirs must be a list of directory paths")

    if not isinstance(config.output_files, dict):
        raise ConfigError("output_files must map orientations to file paths")

    for orientation, path in config.output_files.items():
        if not isinstance(path, str):
            raise ConfigError(f"Output path for {orientation} must be a string")


def validate_config(config: AppConfig) -> None:
    """
    Check the configuration before any scanning starts.

    Args:
        config: Application configuration

    Raises:
        ConfigError: If the configuration cannot be used for a run
    """
    _check_types(config)

    if not config.input_dirs:
        raise ConfigError("No input directories specified. Please provide at least one directory containing photos.")

    if not config.output_files:
        raise ConfigError("No output files specified. Please provide at least one output file for the report.")

    for orientation in config.output_files:
        if orientation not in ORIENTATIONS:
            raise ConfigError(f"Unknown orientation: {orientation}")

    if config.all_target and len(config.output_files) > 1:
        raise ConfigError("--all cannot be used alongside --portrait, --landscape, or --square")

    for directory in config.input_dirs:
        if not os.path.isdir(directory):
            raise ConfigError(f"Input directory does not exist: {directory}")

    for orientation, path in config.output_files.items():
        if not path.strip():
            raise ConfigError(f"Empty output path specified for {orientation}")


ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')


def _expand_env(value: Any) -> Any:
    """
    Replace ``${NAME}`` references in strings, walking into lists and objects.

    Unset variables expand to an empty string and are logged.
    """
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    if not isinstance(value, str):
        return value

    def lookup(match):
        name = match.group(1)
        if name not in os.environ:
            logger.warning(f"Environment variable {name} not found")
            return ""
        return os.environ[name]

    return ENV_VAR_PATTERN.sub(lookup, value)


def load_config(config_path: str) -> AppConfig:
    """
    Load configuration defaults from a JSON file.

    Args:
        config_path: Path to the configuration JSON file

    Returns:
        AppConfig object

    Raises:
        ConfigError: If the file contains unknown or malformed settings
        RuntimeError: If the configuration file cannot be loaded
    """
    config_path = os.path.abspath(os.path.expanduser(config_path))

    try:
        with open(config_path, 'r', encoding='utf-8') as cfg:
            config_dict = json.load(cfg)
    except (json.JSONDecodeError, IOError) as e:
        raise RuntimeError(f"Failed to load configuration from {config_path}: {str(e)}")

    if not isinstance(config_dict, dict):
        raise ConfigError(f"Configuration in {config_path} must be a JSON object")

    config_dict = _expand_env(config_dict)

    known = {f.name for f in fields(AppConfig)}
    unknown = sorted(set(config_dict) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration field(s) in {config_path}: {', '.join(unknown)}")

    config = AppConfig(**config_dict)
    _check_types(config)

    # Orientation labels are matched case-insensitively everywhere else
    config.output_files = {k.lower(): v for k, v in config.output_files.items()}

    return config
