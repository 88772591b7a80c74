"""Configuration module for fsbench.

This module provides centralized settings via pydantic-settings and
loaders for the per-user YAML settings file.
"""

from fsbench.config.exceptions import ConfigurationError
from fsbench.config.loader import (
    default_settings_path,
    load_settings,
    save_settings_file,
)
from fsbench.config.settings import (
    EnvironmentSettings,
    Settings,
    WorkloadSettings,
    get_settings,
)

__all__ = [
    "ConfigurationError",
    "default_settings_path",
    "EnvironmentSettings",
    "get_settings",
    "load_settings",
    "save_settings_file",
    "Settings",
    "WorkloadSettings",
]
