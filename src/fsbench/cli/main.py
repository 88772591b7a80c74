"""CLI main entry point.

This module provides the main entry point for the fsbench CLI.
"""

import argparse
import sys
import traceback
from collections.abc import Callable

from fsbench.benchmark.exceptions import BenchmarkInterrupted
from fsbench.cli.commands import (
    BaseCommand,
    CommandResult,
    CompareRecordsCommand,
    DeleteRecordCommand,
    ExportRecordsCommand,
    ListRecordsCommand,
    RunBenchmarkCommand,
    SettingsCommand,
    ShowRecordCommand,
    TipsCommand,
)
from fsbench.cli.menu import InteractiveMenu
from fsbench.cli.parser import create_parser
from fsbench.cli.validators import validate_args
from fsbench.exceptions import FsBenchError
from fsbench.logging_config import configure_logging, get_logger

__all__ = ["main", "CommandDispatcher"]

logger = get_logger(__name__)

INTERRUPTED_EXIT_CODE = 130


class CommandDispatcher:
    """Dispatches CLI commands to appropriate handlers.

    Attributes:
        commands: Command handlers keyed by subcommand name.

    """

    def __init__(self, prompt: Callable[[str], str] = input) -> None:
        """Initialize the command dispatcher with all command handlers.

        Args:
            prompt: Reads confirmations for destructive commands.

        """
        handlers: list[BaseCommand] = [
            RunBenchmarkCommand(),
            ListRecordsCommand(),
            ShowRecordCommand(),
            CompareRecordsCommand(),
            DeleteRecordCommand(prompt=prompt),
            ExportRecordsCommand(),
            SettingsCommand(),
            TipsCommand(),
        ]
        self.commands: dict[str, BaseCommand] = {cmd.name: cmd for cmd in handlers}

    def run(self, args: argparse.Namespace) -> CommandResult:
        """Execute the command named by ``args.command``.

        Args:
            args: Parsed command-line arguments.

        Returns:
            The command's result.

        Raises:
            KeyError: If no handler exists for the command.

        """
        command = self.commands[args.command]
        logger.debug("command_dispatched", command=command.name)
        return command.execute(args)

    def dispatch(self, args: argparse.Namespace) -> int:
        """Dispatch to the appropriate command and print its output.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code (0 for success, non-zero for errors).

        """
        result = self.run(args)
        if result.message:
            stream = sys.stdout if result.exit_code == 0 else sys.stderr
            print(result.message, file=stream)
        return result.exit_code


def main(argv: list[str] | None = None) -> int:
    """Run the CLI application.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).

    """
    parser = create_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "menu"

    # Set up logging
    _setup_logging(getattr(args, "verbose", False))

    # Validate arguments
    error = validate_args(args)
    if error:
        print(error, file=sys.stderr)
        return 1

    try:
        dispatcher = CommandDispatcher()
        if args.command == "menu":
            return InteractiveMenu(dispatcher, args).loop()
        return dispatcher.dispatch(args)

    except (KeyboardInterrupt, BenchmarkInterrupted):
        print("\nInterrupted by user", file=sys.stderr)
        return INTERRUPTED_EXIT_CODE

    except FsBenchError as e:
        logger.error("command_failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except Exception as e:
        logger.exception("fatal_error", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        if getattr(args, "verbose", False):
            traceback.print_exc()
        return 1


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI.

    Args:
        verbose: Whether to enable debug-level logging to console.

    """
    configure_logging(verbose=verbose, json_output=False)


if __name__ == "__main__":
    sys.exit(main())
