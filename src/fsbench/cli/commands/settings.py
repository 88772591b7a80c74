"""Settings and tips commands.

This module implements showing and updating the persisted default
settings, and the measurement advice screen.
"""

import os
from argparse import Namespace
from typing import Any

from pydantic import ValidationError

from fsbench.benchmark.environment import EnvironmentController
from fsbench.benchmark.utils import format_bytes
from fsbench.cli.commands.base import BaseCommand, CommandResult, settings_path
from fsbench.cli.formatters import format_settings, format_tips
from fsbench.cli.validators import parse_assignment
from fsbench.config.loader import default_settings_path, load_settings, save_settings_file
from fsbench.config.settings import Settings
from fsbench.logging_config import get_logger

__all__ = ["SettingsCommand", "TipsCommand"]

logger = get_logger(__name__)


def apply_assignments(settings: Settings, assignments: list[str]) -> Settings:
    """Return new settings with ``KEY=VALUE`` assignments applied.

    Args:
        settings: Current settings.
        assignments: Assignments with dotted keys for nested sections,
            e.g. ``num_runs=5`` or ``workload.io_depth=64``.

    Returns:
        The validated, updated settings.

    Raises:
        KeyError: If a key does not name a setting.
        ValueError: If an assignment is malformed.
        ValidationError: If a value is out of range.

    """
    data: dict[str, Any] = settings.model_dump(mode="json")
    for assignment in assignments:
        key, value = parse_assignment(assignment)
        *sections, field = key.split(".")
        target = data
        for section in sections:
            nested = target.get(section)
            if not isinstance(nested, dict):
                raise KeyError(key)
            target = nested
        if field not in target or isinstance(target[field], dict):
            raise KeyError(key)
        target[field] = value
    return Settings(**data)


class SettingsCommand(BaseCommand):
    """Command to show or change the default settings."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "settings"

    def execute(self, args: Namespace) -> CommandResult:
        """Show settings, optionally applying and saving assignments."""
        path = settings_path(args) or default_settings_path()
        settings = load_settings(path)

        assignments = getattr(args, "set", None) or []
        if assignments:
            try:
                settings = apply_assignments(settings, assignments)
            except KeyError as e:
                return CommandResult(exit_code=1, message=f"Error: unknown setting {e}")
            except ValidationError as e:
                details = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                )
                return CommandResult(exit_code=1, message=f"Error: {details}")
            except ValueError as e:
                return CommandResult(exit_code=1, message=f"Error: {e}")

        message = format_settings(settings, path)
        if getattr(args, "save", False):
            save_settings_file(settings, path)
            message += f"\n\nSettings saved to {path}"
        elif assignments:
            message += "\n\nNot saved (use --save to persist)"
        return CommandResult(exit_code=0, message=message)


class TipsCommand(BaseCommand):
    """Command to show advice for stable measurements."""

    def __init__(self, environment: EnvironmentController | None = None) -> None:
        """Initialize the command.

        Args:
            environment: Source of the current CPU governor.

        """
        self._environment = environment or EnvironmentController()

    @property
    def name(self) -> str:
        """Get the command name."""
        return "tips"

    def execute(self, args: Namespace) -> CommandResult:
        """Show the tips and the current system state."""
        try:
            load_average: tuple[float, float, float] | None = os.getloadavg()
        except OSError:
            load_average = None

        message = format_tips(
            self._environment.current_governor(),
            load_average,
            _available_memory(),
        )
        return CommandResult(exit_code=0, message=message)


def _available_memory(meminfo: str = "/proc/meminfo") -> str | None:
    try:
        with open(meminfo, encoding="utf-8") as f:
            for line in f:
                if line.startswith("MemAvailable:"):
                    return format_bytes(int(line.split()[1]) * 1024)
    except (OSError, ValueError, IndexError) as e:
        logger.debug("meminfo_unavailable", error=str(e))
    return None
