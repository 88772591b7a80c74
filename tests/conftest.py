"""Pytest configuration and shared fixtures for the fsbench test suite.

This module provides fixtures for building benchmark records and run
configurations without touching a real filesystem under test.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from fsbench.benchmark.statistics import summarize
from fsbench.models.config import RunConfig
from fsbench.models.enums import Metric
from fsbench.models.results import BenchmarkRecord, Statistics

RecordFactory = Callable[..., BenchmarkRecord]


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    """Provide a small run configuration rooted in a temporary mount point.

    Args:
        tmp_path: pytest's built-in temporary directory fixture.

    Returns:
        A RunConfig whose mount point exists.
    """
    mount = tmp_path / "mnt"
    mount.mkdir()
    return RunConfig(
        name="baseline",
        mount_point=mount,
        num_runs=3,
        num_files=100,
        num_jobs=1,
        block_size="4k",
    )


@pytest.fixture
def make_record(tmp_path: Path) -> RecordFactory:
    """Provide a factory for benchmark records with chosen samples.

    The factory accepts the benchmark name, timestamp and a mapping of
    metric to samples; metrics left out have no data.

    Returns:
        Callable building a BenchmarkRecord.
    """

    def _make(
        name: str = "baseline",
        timestamp: str = "20240101_120000",
        samples: dict[Metric, list[float]] | None = None,
        missing: dict[Metric, int] | None = None,
        device: str = "/dev/sdb1",
        num_files: int = 1000,
    ) -> BenchmarkRecord:
        config = RunConfig(
            name=name,
            mount_point=tmp_path / "mnt",
            num_files=num_files,
        )
        statistics: dict[Metric, Statistics] = {
            metric: summarize(values, metric.better_direction)
            for metric, values in (samples or {}).items()
        }
        return BenchmarkRecord.from_statistics(
            config=config,
            timestamp=timestamp,
            kernel_version="6.8.0-test",
            device=device,
            statistics=statistics,
            missing_samples=missing,
        )

    return _make
