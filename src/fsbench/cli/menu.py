"""Interactive menu.

This module provides the numbered menu shown when fsbench is started
without a subcommand. Every entry gathers its inputs with prompts and
then runs the same command handlers as the subcommand CLI.
"""

import argparse
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from fsbench.cli.commands.base import CommandResult, resolve_settings
from fsbench.cli.exceptions import ValidationError
from fsbench.exceptions import FsBenchError
from fsbench.logging_config import get_logger

if TYPE_CHECKING:
    from fsbench.cli.main import CommandDispatcher

__all__ = ["MENU_OPTIONS", "InteractiveMenu"]

logger = get_logger(__name__)

MENU_OPTIONS = (
    ("1", "Run New Benchmark"),
    ("2", "Compare Benchmarks"),
    ("3", "List Benchmarks"),
    ("4", "Delete Benchmark"),
    ("5", "View Benchmark Details"),
    ("6", "Export Results to CSV"),
    ("7", "Settings"),
    ("8", "Performance Tips"),
    ("9", "Exit"),
)

EXIT_CHOICE = "9"


class InteractiveMenu:
    """Numbered menu loop over the CLI commands.

    Attributes:
        dispatcher: Runs the selected commands.
        base_args: Global options (settings file, results directory)
            applied to every command.

    """

    def __init__(
        self,
        dispatcher: "CommandDispatcher",
        base_args: argparse.Namespace,
        input_fn: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ) -> None:
        """Initialize the menu.

        Args:
            dispatcher: Runs the selected commands.
            base_args: Parsed global options.
            input_fn: Reads one line of user input.
            output: Writes one block of text.

        """
        self.dispatcher = dispatcher
        self.base_args = base_args
        self._input = input_fn
        self._output = output
        self._actions: dict[str, Callable[[], None]] = {
            "1": self._run_benchmark,
            "2": self._compare,
            "3": self._list,
            "4": self._delete,
            "5": self._show,
            "6": self._export,
            "7": self._settings,
            "8": self._tips,
        }

    def render(self) -> str:
        """Return the menu text."""
        lines = ["", "=" * 40, "Filesystem Benchmark Menu", "=" * 40]
        lines.extend(f"  {key}. {label}" for key, label in MENU_OPTIONS)
        return "\n".join(lines)

    def loop(self) -> int:
        """Show the menu until the user exits.

        Errors of individual actions are reported and the menu is shown
        again. Interrupts propagate to the caller.

        Returns:
            Exit code, 0 when the user leaves the menu.

        """
        while True:
            self._output(self.render())
            try:
                choice = self._input(f"Select an option [1-{EXIT_CHOICE}]: ").strip()
            except EOFError:
                return 0

            if choice == EXIT_CHOICE:
                return 0

            action = self._actions.get(choice)
            if action is None:
                self._output(f"Invalid option: {choice!r}")
                continue

            try:
                action()
            except EOFError:
                return 0
            except (FsBenchError, ValueError) as e:
                logger.warning("menu_action_failed", choice=choice, error=str(e))
                self._output(f"Error: {e}")

    def _args(self, command: str, **values: Any) -> argparse.Namespace:
        args = argparse.Namespace(**vars(self.base_args))
        args.command = command
        for key, value in values.items():
            setattr(args, key, value)
        return args

    def _execute(self, command: str, **values: Any) -> CommandResult:
        result = self.dispatcher.run(self._args(command, **values))
        if result.message:
            self._output(result.message)
        return result

    def _ask(self, prompt: str) -> str:
        return self._input(f"{prompt}: ").strip()

    def _ask_int(self, prompt: str) -> int | None:
        answer = self._ask(prompt)
        if not answer:
            return None
        try:
            return int(answer)
        except ValueError:
            raise ValidationError(f"{answer!r} is not a whole number") from None

    def _run_benchmark(self) -> None:
        settings = resolve_settings(self.base_args)
        name = self._ask("Benchmark name (e.g. kernel or mount options)")
        if not name:
            self._output("A benchmark name is required")
            return

        mount = self._ask(f"Mount point [{settings.mount_point}]") or None
        runs = self._ask_int(f"Number of runs [{settings.num_runs}]")
        files = self._ask_int(f"Files per metadata workload [{settings.num_files}]")
        jobs = self._ask_int(f"Parallel jobs [{settings.num_jobs}]")
        block_size = self._ask(f"Block size [{settings.block_size}]") or None

        self._execute(
            "run",
            name=name,
            mount=mount,
            runs=runs,
            files=files,
            jobs=jobs,
            block_size=block_size,
        )

    def _list(self) -> None:
        self._execute("list")

    def _pick_records(self, prompt: str) -> list[str]:
        self._list()
        return self._ask(prompt).split()

    def _compare(self) -> None:
        references = self._pick_records(
            "Record numbers to compare (space separated, or 'all')"
        )
        if references == ["all"]:
            self._execute("compare", records=[], all=True)
        else:
            self._execute("compare", records=references, all=False)

    def _delete(self) -> None:
        references = self._pick_records("Record number to delete")
        if references:
            self._execute("delete", record=references[0], yes=False)

    def _show(self) -> None:
        references = self._pick_records("Record number to view")
        if references:
            self._execute("show", record=references[0])

    def _export(self) -> None:
        references = self._pick_records("Record numbers to export [all]")
        if references == ["all"]:
            references = []
        output = self._ask("Output file [benchmark_export.csv in the results directory]")
        self._execute("export", records=references, output=output or None)

    def _settings(self) -> None:
        self._execute("settings", set=None, save=False)
        assignments: list[str] = []
        while True:
            assignment = self._ask("Change a setting (KEY=VALUE, blank to finish)")
            if not assignment:
                break
            assignments.append(assignment)
        if assignments:
            self._execute("settings", set=assignments, save=True)

    def _tips(self) -> None:
        self._execute("tips")
