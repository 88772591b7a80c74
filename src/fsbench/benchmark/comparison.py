"""Multi-way comparison of stored benchmark records.

For every metric, the record with the most favorable best result wins
(highest for throughput and IOPS, lowest for elapsed time). Winners of
the headline metrics earn points; the record with the most points is
the overall winner.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from fsbench.benchmark.exceptions import BenchmarkError
from fsbench.benchmark.report import files_per_second, format_value
from fsbench.logging_config import get_logger
from fsbench.models.enums import BetterDirection, Metric, MetricUnit
from fsbench.models.results import BenchmarkRecord

__all__ = [
    "METRIC_POINTS",
    "ComparisonResult",
    "MetricComparison",
    "compare_records",
    "format_comparison_table",
]

logger = get_logger(__name__)

METRIC_POINTS: dict[Metric, int] = {
    Metric.seq_write_mbps: 10,
    Metric.seq_read_mbps: 10,
    Metric.rand_write_iops: 15,
    Metric.rand_read_iops: 15,
}


@dataclass
class MetricComparison:
    """Values of one metric across the compared records.

    Attributes:
        metric: The metric compared.
        values: Best result of each record, in record order.
        winner_index: Index of the winning record, or None without data.

    """

    metric: Metric
    values: list[float | None]
    winner_index: int | None = None


@dataclass
class ComparisonResult:
    """Outcome of comparing several records.

    Attributes:
        records: The records compared, in input order.
        metrics: Per-metric comparisons, skipping metrics with no data.
        scores: Points per record, in record order.

    """

    records: list[BenchmarkRecord]
    metrics: list[MetricComparison] = field(default_factory=list)
    scores: list[int] = field(default_factory=list)

    @property
    def overall_winner(self) -> BenchmarkRecord | None:
        """Record with the most points; the earliest wins ties."""
        if not self.scores or max(self.scores) == 0:
            return None
        return self.records[self.scores.index(max(self.scores))]


def _winner(values: Sequence[float | None], direction: BetterDirection) -> int | None:
    present = [(i, v) for i, v in enumerate(values) if v is not None]
    if not present:
        return None
    if direction is BetterDirection.lower:
        return min(present, key=lambda item: item[1])[0]
    return max(present, key=lambda item: item[1])[0]


def compare_records(records: Sequence[BenchmarkRecord]) -> ComparisonResult:
    """Compare the best results of two or more records.

    Args:
        records: Records to compare.

    Returns:
        Per-metric winners and point scores.

    Raises:
        BenchmarkError: If fewer than two records are given.

    """
    if len(records) < 2:
        raise BenchmarkError("At least two records are required for a comparison")

    result = ComparisonResult(records=list(records), scores=[0] * len(records))

    for metric in Metric:
        values = [record.best_results.get(metric) for record in records]
        winner = _winner(values, metric.better_direction)
        if winner is None:
            logger.debug("metric_without_data", metric=metric.value)
            continue
        result.metrics.append(MetricComparison(metric, values, winner))
        result.scores[winner] += METRIC_POINTS.get(metric, 0)

    logger.info(
        "records_compared",
        records=[r.benchmark_name for r in records],
        scores=result.scores,
    )
    return result


def format_comparison_table(result: ComparisonResult) -> str:
    """Format a comparison as an ASCII table.

    Args:
        result: Comparison to render.

    Returns:
        Formatted ASCII table string. The winning cell of each row is
        marked with ``*``.

    """
    records = result.records
    column = max(14, *(min(len(r.benchmark_name), 24) for r in records))

    lines = ["Benchmark Comparison", "=" * 70, ""]
    header = f"{'Metric':<22}" + "".join(
        f"  {r.benchmark_name[:24]:>{column}}" for r in records
    )
    lines.append(header)
    lines.append(f"{'':<22}" + "".join(f"  {r.timestamp:>{column}}" for r in records))
    lines.append("-" * len(header))

    for comparison in result.metrics:
        metric = comparison.metric
        row = f"{metric.label:<22}"
        for index, value in enumerate(comparison.values):
            cell = format_value(value, metric.unit)
            if index == comparison.winner_index:
                cell += " *"
            row += f"  {cell:>{column}}"
        lines.append(row)

        if metric.unit is MetricUnit.seconds:
            rates = [
                files_per_second(record, metric, value)
                for record, value in zip(records, comparison.values)
            ]
            rate_row = f"{'':<22}" + "".join(
                f"  {(f'{rate:,.0f} files/s' if rate is not None else '-'):>{column}}"
                for rate in rates
            )
            lines.append(rate_row)

    lines.append("-" * len(header))
    lines.append(
        f"{'Score':<22}" + "".join(f"  {score:>{column}}" for score in result.scores)
    )

    winner = result.overall_winner
    lines.append("")
    if winner is None:
        lines.append("Overall winner: none (no scored metrics)")
    else:
        lines.append(f"Overall winner: {winner.benchmark_name} ({winner.timestamp})")
    return "\n".join(lines)
