"""CSV export of stored benchmark records."""

from __future__ import annotations

import csv
from collections.abc import Sequence
from pathlib import Path

from fsbench.benchmark.exceptions import StorageError
from fsbench.logging_config import get_logger
from fsbench.models.enums import Metric
from fsbench.models.results import BenchmarkRecord

__all__ = ["CSV_HEADER", "export_csv", "record_to_row"]

logger = get_logger(__name__)

CSV_HEADER = (
    "Benchmark Name",
    "Timestamp",
    "Kernel Version",
    "Device",
    "Seq Write (MB/s)",
    "Seq Read (MB/s)",
    "Rand Write IOPS",
    "Rand Read IOPS",
    "Mixed Read IOPS",
    "Mixed Write IOPS",
    "File Create Time",
    "File Delete Time",
    "Dir Create Time",
)


def record_to_row(record: BenchmarkRecord) -> list[str]:
    """Flatten a record's metadata and best results into CSV cells."""
    row = [record.benchmark_name, record.timestamp, record.kernel_version, record.device]
    for metric in Metric:
        value = record.best_results.get(metric)
        row.append("" if value is None else f"{value:.2f}")
    return row


def export_csv(records: Sequence[BenchmarkRecord], path: Path) -> Path:
    """Write records to a CSV file, one row per record.

    Args:
        records: Records to export.
        path: Destination file.

    Returns:
        The written path.

    Raises:
        StorageError: If the file cannot be written.

    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            for record in records:
                writer.writerow(record_to_row(record))
    except OSError as e:
        raise StorageError(f"Failed to export records to {path}: {e}") from e

    logger.info("records_exported", path=str(path), count=len(records))
    return path
