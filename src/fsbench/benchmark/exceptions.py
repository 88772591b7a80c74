"""Domain-specific exceptions for the benchmark system.

This module defines exceptions for preflight checks, workload trials,
tool output parsing, environment restoration, interruption and storage.
"""

from __future__ import annotations

from fsbench.exceptions import FsBenchError

__all__ = [
    "BenchmarkError",
    "BenchmarkInterrupted",
    "PreflightError",
    "RecordNotFoundError",
    "RestorationFailure",
    "StorageError",
    "ToolOutputError",
    "TrialError",
    "TrialTimeout",
]


class BenchmarkError(FsBenchError):
    """Exception for benchmark orchestration errors."""

    pass


class PreflightError(BenchmarkError):
    """Exception raised when the host is not fit to run a benchmark.

    Attributes:
        issues: Every problem found, in check order.

    """

    def __init__(self, issues: list[str]) -> None:
        self.issues = list(issues)
        super().__init__("Preflight checks failed: " + "; ".join(self.issues))


class TrialError(BenchmarkError):
    """Exception for a workload trial that could not be carried out."""

    pass


class TrialTimeout(TrialError):
    """Exception for a workload trial that exceeded its time limit."""

    pass


class ToolOutputError(BenchmarkError):
    """Exception for tool output that holds no usable metric."""

    pass


class RestorationFailure(BenchmarkError):
    """Exception for a single environment restoration step that failed."""

    pass


class BenchmarkInterrupted(BenchmarkError):
    """Exception raised when a termination signal arrives mid-benchmark."""

    pass


class StorageError(BenchmarkError):
    """Exception for result storage and loading failures."""

    pass


class RecordNotFoundError(StorageError):
    """Exception for a record id with no stored record."""

    pass
