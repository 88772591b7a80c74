"""Base command class for CLI commands.

This module defines the abstract base class for CLI commands
following the Command pattern, plus helpers shared by the commands.
"""

from abc import ABC, abstractmethod
from argparse import Namespace
from pathlib import Path

from fsbench.benchmark.storage import ResultStore
from fsbench.config.loader import load_settings
from fsbench.config.settings import Settings
from fsbench.models.base import BaseSchema

__all__ = [
    "BaseCommand",
    "CommandResult",
    "resolve_record_id",
    "resolve_settings",
    "settings_path",
]


class CommandResult(BaseSchema):
    """Result of a command execution.

    Attributes:
        exit_code: Exit code for the CLI (0 for success).
        message: Optional message to display.

    """

    exit_code: int
    message: str | None = None


class BaseCommand(ABC):
    """Abstract base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the command name for logging and display."""
        pass

    @abstractmethod
    def execute(self, args: Namespace) -> CommandResult:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            CommandResult with exit code and output message.

        """
        pass

    def store(self, args: Namespace) -> ResultStore:
        """Return the record store selected by the arguments."""
        return ResultStore(resolve_settings(args).resolved_results_dir)


def settings_path(args: Namespace) -> Path | None:
    """Return the settings file given with ``--config``, if any."""
    config = getattr(args, "config", None)
    return Path(config).expanduser() if config else None


def resolve_settings(args: Namespace) -> Settings:
    """Load settings and apply the global command-line overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        The effective settings.

    Raises:
        ConfigurationError: If the settings file is malformed.

    """
    settings = load_settings(settings_path(args))
    results_dir = getattr(args, "results_dir", None)
    if results_dir:
        settings = settings.model_copy(update={"results_dir": Path(results_dir)})
    return settings


def resolve_record_id(store: ResultStore, reference: str) -> str:
    """Turn a list number into a record id.

    Args:
        store: The record store.
        reference: A record id, or a 1-based position in the listing.

    Returns:
        The record id. Unknown references are returned unchanged so
        that loading reports them as not found.

    """
    reference = reference.strip()
    if reference.isdigit():
        summaries = store.list()
        index = int(reference)
        if 1 <= index <= len(summaries):
            return summaries[index - 1].record_id
    return reference
