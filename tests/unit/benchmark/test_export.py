"""Unit tests for CSV export."""

import csv
from pathlib import Path

import pytest

from fsbench.benchmark.exceptions import StorageError
from fsbench.benchmark.export import CSV_HEADER, export_csv, record_to_row
from fsbench.models.enums import Metric


class TestExportCsv:
    """Tests for export_csv."""

    def test_header_and_rows(self, tmp_path: Path, make_record) -> None:
        """Test that one row per record follows the header."""
        records = [
            make_record(name="a", samples={Metric.seq_write_mbps: [120.5]}),
            make_record(name="b", samples={Metric.rand_read_iops: [8000.0]}),
        ]
        path = tmp_path / "out" / "export.csv"

        export_csv(records, path)

        with path.open(newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == list(CSV_HEADER)
        assert len(rows) == 3
        assert rows[1][0] == "a"
        assert rows[1][4] == "120.50"
        assert rows[2][7] == "8000.00"

    def test_header_columns(self) -> None:
        """Test the column layout of the export."""
        assert len(CSV_HEADER) == 13
        assert CSV_HEADER[:4] == ("Benchmark Name", "Timestamp", "Kernel Version", "Device")
        assert CSV_HEADER[-1] == "Dir Create Time"

    def test_missing_values_are_empty(self, make_record) -> None:
        """Test that metrics without data export as empty cells."""
        row = record_to_row(make_record(samples={Metric.dir_create_time: [1.25]}))

        assert row[4:12] == [""] * 8
        assert row[12] == "1.25"

    def test_write_failure_raises(self, tmp_path: Path, make_record) -> None:
        """Test that an unwritable destination raises StorageError."""
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(StorageError):
            export_csv([make_record()], blocker / "export.csv")
