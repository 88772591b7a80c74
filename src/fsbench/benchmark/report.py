"""Human-readable rendering of benchmark results.

Builds plain-text summaries, ASCII bar charts and record listings.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from fsbench.config.defaults import CHART_WIDTH
from fsbench.models.enums import Metric, MetricUnit
from fsbench.models.results import BenchmarkRecord, RecordSummary, Statistics

__all__ = [
    "files_per_second",
    "format_ascii_chart",
    "format_record_details",
    "format_record_list",
    "format_run_report",
    "format_statistics",
    "format_value",
]

_RULE = "=" * 60


def format_value(value: float | None, unit: MetricUnit | None = None) -> str:
    """Format a metric value for display; None becomes ``n/a``."""
    if value is None:
        return "n/a"
    text = f"{value:,.0f}" if unit is MetricUnit.iops else f"{value:.2f}"
    return f"{text} {unit.value}" if unit is not None else text


def format_statistics(metric: Metric, stats: Statistics, missing: int = 0) -> list[str]:
    """Render the summary lines of one metric.

    Args:
        metric: The metric summarized.
        stats: Its statistics.
        missing: Trials of the metric that produced no sample.

    Returns:
        Lines of text.

    """
    lines = [f"{metric.label} ({metric.unit.value})"]
    if not stats.has_data:
        lines.append("  no data")
    else:
        unit = metric.unit
        lines.append(
            f"  Best: {format_value(stats.best, unit)}"
            f"  Median: {format_value(stats.median, unit)}"
            f"  Worst: {format_value(stats.worst, unit)}"
        )
        lines.append(
            f"  Mean: {format_value(stats.mean, unit)}"
            f"  Std Dev: {format_value(stats.stddev)}"
            f" ({stats.variance_ratio or 0.0:.2f}%)"
        )
        if stats.high_variance:
            lines.append(
                f"  WARNING: high variance ({stats.variance_ratio:.2f}%), "
                "results may be unreliable"
            )
    if missing:
        lines.append(f"  {missing} trial(s) timed out and produced no sample")
    return lines


def format_ascii_chart(
    title: str,
    values: Sequence[float],
    labels: Sequence[str] | None = None,
    unit: str = "",
    width: int = CHART_WIDTH,
) -> str:
    """Render values as horizontal bars scaled to the largest value.

    Args:
        title: Chart heading.
        values: Bar values.
        labels: Bar labels; defaults to ``Run 1``, ``Run 2``, ...
        unit: Unit appended to each value.
        width: Length of the longest bar.

    Returns:
        The chart text.

    """
    if labels is None:
        labels = [f"Run {i}" for i in range(1, len(values) + 1)]
    lines = [title]
    if not values:
        lines.append("  no data")
        return "\n".join(lines)

    peak = max(values)
    label_width = max(len(label) for label in labels)
    for label, value in zip(labels, values):
        length = int(value / peak * width) if peak > 0 else 0
        bar = "#" * length
        suffix = f" {value:.2f}{(' ' + unit) if unit else ''}"
        lines.append(f"  {label.ljust(label_width)} |{bar.ljust(width)}|{suffix}")
    return "\n".join(lines)


def format_run_report(
    statistics: Mapping[Metric, Statistics],
    missing_samples: Mapping[Metric, int] | None = None,
    title: str = "Benchmark Summary",
) -> str:
    """Render the end-of-run summary for every metric.

    Args:
        statistics: Statistics per metric.
        missing_samples: Timed-out trials per metric.
        title: Report heading.

    Returns:
        The report text.

    """
    missing_samples = missing_samples or {}
    lines = ["", _RULE, title, _RULE]

    for metric in Metric:
        stats = statistics.get(metric, Statistics())
        lines.append("")
        lines.extend(format_statistics(metric, stats, missing_samples.get(metric, 0)))

    for metric in Metric:
        stats = statistics.get(metric)
        if stats is None or not stats.has_data or stats.count < 2:
            continue
        lines.append("")
        lines.append(
            format_ascii_chart(
                f"{metric.label} per run ({metric.unit.value})",
                stats.samples,
            )
        )

    return "\n".join(lines)


def format_record_list(summaries: Sequence[RecordSummary]) -> str:
    """Render the stored-record listing as a table."""
    if not summaries:
        return "No benchmark records found."

    headers = ("#", "Record", "Name", "Timestamp", "Kernel", "Device")
    rows = [
        (str(i), s.record_id, s.benchmark_name, s.timestamp, s.kernel_version, s.device)
        for i, s in enumerate(summaries, start=1)
    ]
    widths = [max(len(h), *(len(row[i]) for row in rows)) for i, h in enumerate(headers)]

    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append("  ".join("-" * w for w in widths))
    for row in rows:
        lines.append("  ".join(cell.ljust(w) for cell, w in zip(row, widths)))
    return "\n".join(lines)


def files_per_second(record: BenchmarkRecord, metric: Metric, value: float | None) -> float | None:
    """Convert an elapsed-time result into an operation rate."""
    if value is None or value <= 0 or metric.unit is not MetricUnit.seconds:
        return None
    return record.config.num_files / value


def format_record_details(record: BenchmarkRecord) -> str:
    """Render one stored record with best and median results."""
    lines = [
        _RULE,
        f"Benchmark: {record.benchmark_name}",
        _RULE,
        f"Timestamp: {record.timestamp}",
        f"Kernel:    {record.kernel_version}",
        f"Device:    {record.device}",
        f"Mount:     {record.config.mount_point}",
        (
            f"Config:    runs={record.config.num_runs} files={record.config.num_files} "
            f"jobs={record.config.num_jobs} block_size={record.config.block_size}"
        ),
        "",
        f"{'Metric':<22}{'Best':>18}{'Median':>18}",
        "-" * 58,
    ]

    for metric in Metric:
        best = record.best_results.get(metric)
        median = record.median_results.get(metric)
        lines.append(
            f"{metric.label:<22}"
            f"{format_value(best, metric.unit):>18}"
            f"{format_value(median, metric.unit):>18}"
        )
        rate = files_per_second(record, metric, best)
        if rate is not None:
            lines.append(f"{'':<22}{f'{rate:,.0f} files/s':>18}")

    if record.degraded:
        lines.append("")
        lines.append("Timed-out trials:")
        for metric, count in record.missing_samples.items():
            lines.append(f"  {metric.label}: {count}")

    return "\n".join(lines)
