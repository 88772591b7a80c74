"""Result models for benchmark samples, statistics and stored records.

This module defines the per-metric sample accumulator used while a
benchmark runs, the derived statistics, and the persisted record.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from pydantic import Field

from fsbench.config.defaults import UNKNOWN_PLACEHOLDER
from fsbench.models.base import BaseSchema, FrozenSchema
from fsbench.models.config import RunConfig
from fsbench.models.enums import Metric

__all__ = [
    "BenchmarkRecord",
    "RecordSummary",
    "SampleSet",
    "Statistics",
]


@dataclass
class SampleSet:
    """Ordered samples of one metric within one benchmark execution.

    Attributes:
        metric: The metric these samples measure.
        values: Samples in run order.
        missing: Number of trials that produced no sample.

    """

    metric: Metric
    values: list[float] = field(default_factory=list)
    missing: int = 0

    def append(self, value: float) -> None:
        """Append a sample.

        Raises:
            ValueError: If the value is negative, NaN or infinite.

        """
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Invalid sample for {self.metric.value}: {value!r}")
        self.values.append(float(value))

    def mark_missing(self) -> None:
        """Record a trial that produced no sample."""
        self.missing += 1

    def __len__(self) -> int:
        return len(self.values)


class Statistics(FrozenSchema):
    """Summary of one metric's samples.

    A result computed from zero samples has ``count == 0`` and every
    numeric field set to None.

    Attributes:
        count: Number of samples summarized.
        samples: The samples, in run order.
        best: Most favorable sample for the metric's direction.
        worst: Least favorable sample.
        median: Median sample.
        mean: Arithmetic mean.
        stddev: Population standard deviation.
        variance_ratio: stddev / median as a percentage (0 when median is 0).
        high_variance: Whether variance_ratio exceeds the warning threshold.

    """

    count: int = Field(default=0, ge=0)
    samples: tuple[float, ...] = ()
    best: float | None = None
    worst: float | None = None
    median: float | None = None
    mean: float | None = None
    stddev: float | None = None
    variance_ratio: float | None = None
    high_variance: bool = False

    @property
    def has_data(self) -> bool:
        """Whether at least one sample was summarized."""
        return self.count > 0


class BenchmarkRecord(BaseSchema):
    """Persisted result of one successful benchmark execution.

    Attributes:
        benchmark_name: User-chosen benchmark name.
        timestamp: Start time, ``YYYYmmdd_HHMMSS``.
        kernel_version: Kernel release of the host.
        device: Block device backing the mount point.
        config: Run configuration snapshot.
        best_results: Best value per metric (None when no data).
        median_results: Median value per metric (None when no data).
        statistics: Full statistics per metric.
        missing_samples: Trials per metric that timed out.
        record_id: Store identifier; set when loaded, never serialized.

    """

    benchmark_name: str
    timestamp: str
    kernel_version: str
    device: str
    config: RunConfig
    best_results: dict[Metric, float | None]
    median_results: dict[Metric, float | None]
    statistics: dict[Metric, Statistics] = Field(default_factory=dict)
    missing_samples: dict[Metric, int] = Field(default_factory=dict)
    record_id: str | None = Field(default=None, exclude=True)

    @classmethod
    def from_statistics(
        cls,
        config: RunConfig,
        timestamp: str,
        kernel_version: str,
        device: str,
        statistics: dict[Metric, Statistics],
        missing_samples: dict[Metric, int] | None = None,
    ) -> BenchmarkRecord:
        """Build a record from per-metric statistics.

        Args:
            config: Configuration the benchmark ran with.
            timestamp: Start time, ``YYYYmmdd_HHMMSS``.
            kernel_version: Kernel release of the host.
            device: Block device backing the mount point.
            statistics: Statistics for every metric.
            missing_samples: Timed-out trials per metric.

        Returns:
            The record, with best and median results for all nine metrics.

        """
        empty = Statistics()
        return cls(
            benchmark_name=config.name,
            timestamp=timestamp,
            kernel_version=kernel_version,
            device=device,
            config=config,
            best_results={m: statistics.get(m, empty).best for m in Metric},
            median_results={m: statistics.get(m, empty).median for m in Metric},
            statistics=statistics,
            missing_samples={m: n for m, n in (missing_samples or {}).items() if n},
        )

    @property
    def degraded(self) -> bool:
        """Whether any trial of this benchmark timed out."""
        return any(self.missing_samples.values())


class RecordSummary(BaseSchema):
    """One row of the stored-record listing.

    Fields that could not be read from the record are ``"unknown"``.

    Attributes:
        record_id: Store identifier (directory name).
        benchmark_name: Benchmark name.
        timestamp: Start time.
        kernel_version: Kernel release of the host.
        device: Block device backing the mount point.

    """

    record_id: str
    benchmark_name: str = UNKNOWN_PLACEHOLDER
    timestamp: str = UNKNOWN_PLACEHOLDER
    kernel_version: str = UNKNOWN_PLACEHOLDER
    device: str = UNKNOWN_PLACEHOLDER
