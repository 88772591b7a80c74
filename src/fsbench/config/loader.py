"""Settings file loading and saving.

The settings file is a YAML mapping using the same field names as
``Settings`` (nested mappings for ``workload`` and ``environment``).
Values from the file take precedence over environment variables, which
take precedence over built-in defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from fsbench.config.defaults import DEFAULT_SETTINGS_FILE
from fsbench.config.exceptions import ConfigurationError
from fsbench.config.settings import Settings
from fsbench.logging_config import get_logger

__all__ = [
    "default_settings_path",
    "load_settings",
    "load_yaml_file",
    "save_settings_file",
]

logger = get_logger(__name__)


def default_settings_path() -> Path:
    """Return the per-user settings file location."""
    return DEFAULT_SETTINGS_FILE.expanduser()


def load_yaml_file(path: Path, label: str = "File") -> dict[str, Any]:
    """Load a YAML file, returning the parsed mapping.

    Args:
        path: Path to the YAML file.
        label: Human-readable label for error messages.

    Returns:
        Parsed dictionary from the YAML file. An empty file yields an
        empty dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file is not valid YAML or not a mapping.

    """
    if not path.exists():
        raise FileNotFoundError(f"{label} not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML file {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read YAML file {path}: {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid YAML structure in {path}: expected mapping, got {type(data).__name__}"
        )

    return data


def load_settings(path: Path | None = None) -> Settings:
    """Build settings from the settings file, environment and defaults.

    A missing settings file is not an error; environment variables and
    defaults apply alone.

    Args:
        path: Settings file to read. Defaults to ``~/.fsbench.yaml``.

    Returns:
        The resolved Settings.

    Raises:
        ConfigurationError: If the file is malformed or a value is invalid.

    """
    path = path or default_settings_path()

    data: dict[str, Any] = {}
    if path.exists():
        data = load_yaml_file(path, label="Settings file")
        logger.debug("settings_file_loaded", path=str(path), keys=sorted(data))

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {path}: {e}") from e


def save_settings_file(settings: Settings, path: Path | None = None) -> Path:
    """Write settings to the settings file.

    Args:
        settings: Settings to persist.
        path: Destination file. Defaults to ``~/.fsbench.yaml``.

    Returns:
        Path of the written file.

    Raises:
        ConfigurationError: If the file cannot be written.

    """
    path = path or default_settings_path()
    data = settings.model_dump(mode="json")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write("# fsbench settings\n")
            yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)
    except OSError as e:
        raise ConfigurationError(f"Failed to save settings to {path}: {e}") from e

    logger.info("settings_saved", path=str(path))
    return path
