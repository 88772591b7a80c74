"""Benchmark engine for filesystem micro-benchmarks.

This module provides the workload runner, sample extraction, summary
statistics, host environment control, record storage, comparison and
export.
"""

from fsbench.benchmark.collector import SampleCollector
from fsbench.benchmark.comparison import (
    ComparisonResult,
    compare_records,
    format_comparison_table,
)
from fsbench.benchmark.environment import EnvironmentController
from fsbench.benchmark.exceptions import (
    BenchmarkError,
    BenchmarkInterrupted,
    PreflightError,
    RecordNotFoundError,
    RestorationFailure,
    StorageError,
    ToolOutputError,
    TrialError,
    TrialTimeout,
)
from fsbench.benchmark.export import export_csv
from fsbench.benchmark.preflight import PreflightChecker
from fsbench.benchmark.runner import BenchmarkRunner
from fsbench.benchmark.statistics import summarize
from fsbench.benchmark.storage import ResultStore
from fsbench.benchmark.utils import sanitize_path_component
from fsbench.benchmark.workloads import TrialOutput, WorkloadExecutor

__all__ = [
    "BenchmarkError",
    "BenchmarkInterrupted",
    "BenchmarkRunner",
    "ComparisonResult",
    "EnvironmentController",
    "PreflightChecker",
    "PreflightError",
    "RecordNotFoundError",
    "RestorationFailure",
    "ResultStore",
    "SampleCollector",
    "StorageError",
    "ToolOutputError",
    "TrialError",
    "TrialOutput",
    "TrialTimeout",
    "WorkloadExecutor",
    "compare_records",
    "export_csv",
    "format_comparison_table",
    "sanitize_path_component",
    "summarize",
]
