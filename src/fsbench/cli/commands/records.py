"""Commands operating on stored benchmark records.

This module implements listing, showing, comparing, deleting and
exporting records kept in the results directory.
"""

from argparse import Namespace
from collections.abc import Callable
from pathlib import Path

from fsbench.benchmark.comparison import compare_records, format_comparison_table
from fsbench.benchmark.exceptions import RecordNotFoundError
from fsbench.benchmark.export import export_csv
from fsbench.benchmark.report import format_record_details, format_record_list
from fsbench.benchmark.storage import ResultStore
from fsbench.cli.commands.base import BaseCommand, CommandResult, resolve_record_id
from fsbench.logging_config import get_logger
from fsbench.models.results import BenchmarkRecord

__all__ = [
    "CompareRecordsCommand",
    "DeleteRecordCommand",
    "ExportRecordsCommand",
    "ListRecordsCommand",
    "ShowRecordCommand",
]

logger = get_logger(__name__)

DEFAULT_EXPORT_NAME = "benchmark_export.csv"


def _load_all(store: ResultStore, references: list[str]) -> list[BenchmarkRecord]:
    return [store.load(resolve_record_id(store, ref)) for ref in references]


class ListRecordsCommand(BaseCommand):
    """Command to list stored records."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "list"

    def execute(self, args: Namespace) -> CommandResult:
        """List stored records, oldest first."""
        store = self.store(args)
        return CommandResult(exit_code=0, message=format_record_list(store.list()))


class ShowRecordCommand(BaseCommand):
    """Command to display one stored record."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "show"

    def execute(self, args: Namespace) -> CommandResult:
        """Show the best and median results of a record."""
        store = self.store(args)
        try:
            record = store.load(resolve_record_id(store, args.record))
        except RecordNotFoundError as e:
            return CommandResult(exit_code=1, message=f"Error: {e}")
        return CommandResult(exit_code=0, message=format_record_details(record))


class CompareRecordsCommand(BaseCommand):
    """Command to compare two or more stored records."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "compare"

    def execute(self, args: Namespace) -> CommandResult:
        """Compare records given by id, list number or ``--all``."""
        store = self.store(args)
        if getattr(args, "all", False):
            references = [summary.record_id for summary in store.list()]
        else:
            references = list(args.records)

        if len(references) < 2:
            return CommandResult(
                exit_code=1,
                message="Error: at least two stored records are needed for a comparison",
            )

        try:
            records = _load_all(store, references)
        except RecordNotFoundError as e:
            return CommandResult(exit_code=1, message=f"Error: {e}")

        result = compare_records(records)
        return CommandResult(exit_code=0, message=format_comparison_table(result))


class DeleteRecordCommand(BaseCommand):
    """Command to delete a stored record and its artifacts."""

    def __init__(self, prompt: Callable[[str], str] = input) -> None:
        """Initialize the command.

        Args:
            prompt: Reads the confirmation answer.

        """
        self._prompt = prompt

    @property
    def name(self) -> str:
        """Get the command name."""
        return "delete"

    def execute(self, args: Namespace) -> CommandResult:
        """Delete a record after the user types ``yes`` (or with ``--yes``)."""
        store = self.store(args)
        record_id = resolve_record_id(store, args.record)

        try:
            record = store.load(record_id)
        except RecordNotFoundError as e:
            return CommandResult(exit_code=1, message=f"Error: {e}")

        if not getattr(args, "yes", False):
            answer = self._prompt(
                f"Delete '{record.benchmark_name}' ({record_id})? Type 'yes' to confirm: "
            )
            if answer.strip().lower() != "yes":
                return CommandResult(exit_code=0, message="Deletion cancelled")

        store.delete(record_id)
        return CommandResult(exit_code=0, message=f"Deleted {record_id}")


class ExportRecordsCommand(BaseCommand):
    """Command to export records to a CSV file."""

    @property
    def name(self) -> str:
        """Get the command name."""
        return "export"

    def execute(self, args: Namespace) -> CommandResult:
        """Export the selected records, or every record, to CSV."""
        store = self.store(args)
        references = list(getattr(args, "records", None) or [])
        if not references:
            references = [summary.record_id for summary in store.list()]
        if not references:
            return CommandResult(exit_code=1, message="No benchmark records to export")

        try:
            records = _load_all(store, references)
        except RecordNotFoundError as e:
            return CommandResult(exit_code=1, message=f"Error: {e}")

        output = getattr(args, "output", None)
        path = Path(output).expanduser() if output else store.root / DEFAULT_EXPORT_NAME
        export_csv(records, path)
        return CommandResult(
            exit_code=0,
            message=f"Exported {len(records)} record(s) to {path}",
        )
