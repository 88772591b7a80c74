"""CLI commands for fsbench.

This module exports all CLI command classes.
"""

from fsbench.cli.commands.base import BaseCommand, CommandResult
from fsbench.cli.commands.records import (
    CompareRecordsCommand,
    DeleteRecordCommand,
    ExportRecordsCommand,
    ListRecordsCommand,
    ShowRecordCommand,
)
from fsbench.cli.commands.run import RunBenchmarkCommand
from fsbench.cli.commands.settings import SettingsCommand, TipsCommand

__all__ = [
    "BaseCommand",
    "CommandResult",
    "CompareRecordsCommand",
    "DeleteRecordCommand",
    "ExportRecordsCommand",
    "ListRecordsCommand",
    "RunBenchmarkCommand",
    "SettingsCommand",
    "ShowRecordCommand",
    "TipsCommand",
]
