"""Benchmark record storage.

Each record lives in its own directory under the results root, named
``<YYYYmmdd_HHMMSS>_<name>``. The directory also holds the run's
diagnostic artifacts (logs, generator reports). A directory only counts
as a record once its ``summary.json`` marker exists; the marker is
written last, through a temporary file and an atomic rename, so listing
and loading never observe a partial record.
"""

from __future__ import annotations

import json
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from fsbench.benchmark.exceptions import RecordNotFoundError, StorageError
from fsbench.benchmark.utils import sanitize_path_component
from fsbench.config.defaults import UNKNOWN_PLACEHOLDER
from fsbench.logging_config import get_logger
from fsbench.models.results import BenchmarkRecord, RecordSummary

__all__ = ["RECORD_MARKER", "TIMESTAMP_FORMAT", "ResultStore"]

logger = get_logger(__name__)

RECORD_MARKER = "summary.json"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

_SUMMARY_FIELDS = ("benchmark_name", "timestamp", "kernel_version", "device")


class ResultStore:
    """Saves, lists, loads and deletes benchmark records.

    Attributes:
        root: Results root directory.

    """

    def __init__(self, root: Path) -> None:
        """Initialize the store.

        Args:
            root: Results root directory. Created on first write.

        """
        self.root = root

    @staticmethod
    def format_timestamp(moment: datetime) -> str:
        """Return the sortable timestamp used in record ids and records."""
        return moment.strftime(TIMESTAMP_FORMAT)

    def record_id_for(self, name: str, timestamp: str) -> str:
        """Return the directory name for a benchmark started at ``timestamp``."""
        return f"{timestamp}_{sanitize_path_component(name)}"

    def create_record_dir(self, name: str, timestamp: str) -> Path:
        """Create a fresh directory for a benchmark's artifacts and record.

        Args:
            name: Benchmark name.
            timestamp: Benchmark start, see format_timestamp().

        Returns:
            The new directory. A numeric suffix is appended if the
            name is already taken.

        Raises:
            StorageError: If the directory cannot be created.

        """
        base = self.record_id_for(name, timestamp)
        candidate = self.root / base
        suffix = 1
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            while True:
                try:
                    candidate.mkdir()
                    break
                except FileExistsError:
                    suffix += 1
                    candidate = self.root / f"{base}_{suffix}"
        except OSError as e:
            raise StorageError(f"Failed to create record directory {candidate}: {e}") from e

        logger.debug("record_dir_created", path=str(candidate))
        return candidate

    def save(self, record: BenchmarkRecord) -> Path:
        """Write a record.

        Args:
            record: The record to save. If its record_id is unset, it is
                derived from the name and timestamp.

        Returns:
            Path to the record's directory.

        Raises:
            StorageError: If the record cannot be written.

        """
        record_id = record.record_id or self.record_id_for(
            record.benchmark_name, record.timestamp
        )
        record_dir = self._resolve(record_id)
        marker = record_dir / RECORD_MARKER
        temp = record_dir / f".{RECORD_MARKER}.tmp"

        try:
            record_dir.mkdir(parents=True, exist_ok=True)
            with temp.open("w", encoding="utf-8") as f:
                json.dump(record.model_dump(mode="json"), f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp, marker)
        except OSError as e:
            temp.unlink(missing_ok=True)
            raise StorageError(f"Failed to save record to {marker}: {e}") from e

        record.record_id = record_id
        logger.info("record_saved", record_id=record_id, path=str(marker))
        return record_dir

    def list(self) -> list[RecordSummary]:
        """List stored records, oldest first.

        Fields that are missing or unreadable are reported as ``"unknown"``
        instead of failing the listing.

        Returns:
            One summary per record directory.

        """
        if not self.root.is_dir():
            return []

        summaries: list[RecordSummary] = []
        for record_dir in sorted(p for p in self.root.iterdir() if p.is_dir()):
            marker = record_dir / RECORD_MARKER
            if not marker.is_file():
                continue
            summaries.append(self._summarize(record_dir.name, marker))
        return summaries

    def load(self, record_id: str) -> BenchmarkRecord:
        """Load a record.

        Args:
            record_id: Record directory name.

        Returns:
            The record, with record_id set.

        Raises:
            RecordNotFoundError: If no such record exists.
            StorageError: If the record cannot be read or parsed.

        """
        marker = self._existing(record_id) / RECORD_MARKER

        try:
            with marker.open("r", encoding="utf-8") as f:
                data = json.load(f)
            record = BenchmarkRecord.model_validate(data)
        except json.JSONDecodeError as e:
            raise StorageError(f"Failed to parse record from {marker}: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read record from {marker}: {e}") from e
        except ValidationError as e:
            raise StorageError(f"Failed to validate record from {marker}: {e}") from e

        record.record_id = record_id
        return record

    def delete(self, record_id: str) -> None:
        """Delete a record and every artifact in its directory.

        Args:
            record_id: Record directory name.

        Raises:
            RecordNotFoundError: If no such record exists.
            StorageError: If the directory cannot be removed.

        """
        record_dir = self._existing(record_id)
        try:
            shutil.rmtree(record_dir)
        except OSError as e:
            raise StorageError(f"Failed to delete record {record_dir}: {e}") from e
        logger.info("record_deleted", record_id=record_id)

    def _resolve(self, record_id: str) -> Path:
        if (
            not record_id
            or record_id in (".", "..")
            or "/" in record_id
            or "\\" in record_id
        ):
            raise RecordNotFoundError(f"Invalid record id: {record_id!r}")
        return self.root / record_id

    def _existing(self, record_id: str) -> Path:
        record_dir = self._resolve(record_id)
        if not (record_dir / RECORD_MARKER).is_file():
            raise RecordNotFoundError(f"Record not found: {record_id}")
        return record_dir

    @staticmethod
    def _summarize(record_id: str, marker: Path) -> RecordSummary:
        data: Any = None
        try:
            with marker.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("record_summary_unreadable", record_id=record_id, error=str(e))

        if not isinstance(data, dict):
            data = {}

        values: dict[str, str] = {}
        for field in _SUMMARY_FIELDS:
            value = data.get(field)
            if isinstance(value, (str, int, float)) and str(value).strip():
                values[field] = str(value)
            else:
                values[field] = UNKNOWN_PLACEHOLDER
        return RecordSummary(record_id=record_id, **values)
