"""Unit tests for sample extraction from trial output."""

import json

import pytest

from fsbench.benchmark.collector import SampleCollector
from fsbench.benchmark.exceptions import ToolOutputError
from fsbench.benchmark.workloads import TrialOutput
from fsbench.models.enums import Metric, WorkloadKind


def _fio_report(read_iops: float | None = None, write_iops: float | None = None) -> str:
    job: dict[str, dict[str, float | None]] = {}
    if read_iops is not None:
        job["read"] = {"iops": read_iops}
    if write_iops is not None:
        job["write"] = {"iops": write_iops}
    return json.dumps({"fio version": "fio-3.36", "jobs": [job]})


class TestParseThroughput:
    """Tests for SampleCollector.parse_throughput."""

    def test_megabytes_per_second(self) -> None:
        """Test that MB/s values are taken as-is."""
        text = "1073741824 bytes (1.1 GB, 1.0 GiB) copied, 8.9 s, 120.5 MB/s"
        assert SampleCollector.parse_throughput(text) == pytest.approx(120.5)

    def test_gigabytes_scaled_up(self) -> None:
        """Test that GB/s values are converted to MB/s."""
        assert SampleCollector.parse_throughput("copied, 0.5 s, 2.1 GB/s") == pytest.approx(
            2.1 * 1024
        )

    def test_kilobytes_scaled_down(self) -> None:
        """Test that kB/s and KB/s values are converted to MB/s."""
        assert SampleCollector.parse_throughput("512 kB/s") == pytest.approx(0.5)
        assert SampleCollector.parse_throughput("2048 KB/s") == pytest.approx(2.0)

    def test_last_token_wins(self) -> None:
        """Test that progress lines before the final summary are ignored."""
        text = (
            "536870912 bytes copied, 4 s, 134 MB/s\n"
            "1073741824 bytes copied, 8.9 s, 120.5 MB/s\n"
        )
        assert SampleCollector.parse_throughput(text) == pytest.approx(120.5)

    def test_no_token_raises(self) -> None:
        """Test that output without a throughput figure raises."""
        with pytest.raises(ToolOutputError):
            SampleCollector.parse_throughput("dd: error writing: No space left on device")


class TestReadIops:
    """Tests for SampleCollector.read_iops."""

    def test_reads_direction(self) -> None:
        """Test that the requested direction is read."""
        report = _fio_report(read_iops=3500.0, write_iops=1500.0)

        assert SampleCollector.read_iops(report, "read") == 3500.0
        assert SampleCollector.read_iops(report, "write") == 1500.0

    def test_accepts_parsed_mapping(self) -> None:
        """Test that an already-parsed report is accepted."""
        report = {"jobs": [{"write": {"iops": 5000}}]}
        assert SampleCollector.read_iops(report, "write") == 5000.0

    def test_missing_field_is_zero(self) -> None:
        """Test that an absent direction counts as 0."""
        assert SampleCollector.read_iops(_fio_report(write_iops=10.0), "read") == 0.0

    def test_null_field_is_zero(self) -> None:
        """Test that a null IOPS figure counts as 0."""
        report = json.dumps({"jobs": [{"read": {"iops": None}}]})
        assert SampleCollector.read_iops(report, "read") == 0.0

    def test_no_jobs_is_zero(self) -> None:
        """Test that a report without jobs counts as 0."""
        assert SampleCollector.read_iops(json.dumps({"jobs": []}), "read") == 0.0

    def test_malformed_json_raises(self) -> None:
        """Test that unparseable reports raise."""
        with pytest.raises(ToolOutputError):
            SampleCollector.read_iops("fio: engine libaio not loadable", "read")


class TestCollect:
    """Tests for SampleCollector.collect dispatch."""

    def test_throughput_metric(self) -> None:
        """Test that throughput metrics parse the trial text."""
        output = TrialOutput(WorkloadKind.sequential_read, text="copied, 1 s, 250 MB/s")
        assert SampleCollector().collect(Metric.seq_read_mbps, output) == 250.0

    def test_mixed_metrics_read_both_directions(self) -> None:
        """Test that the mixed workload yields read and write IOPS."""
        output = TrialOutput(
            WorkloadKind.mixed_read_write,
            text=_fio_report(read_iops=700.0, write_iops=300.0),
        )
        collector = SampleCollector()

        assert collector.collect(Metric.mixed_read_iops, output) == 700.0
        assert collector.collect(Metric.mixed_write_iops, output) == 300.0

    def test_elapsed_metric(self) -> None:
        """Test that elapsed-time metrics use the measured duration."""
        output = TrialOutput(WorkloadKind.file_create, elapsed_seconds=0.42)
        assert SampleCollector().collect(Metric.file_create_time, output) == 0.42

    def test_negative_value_rejected(self) -> None:
        """Test that a negative sample is never accepted."""
        output = TrialOutput(WorkloadKind.dir_create, elapsed_seconds=-1.0)
        with pytest.raises(ToolOutputError):
            SampleCollector().collect(Metric.dir_create_time, output)

    def test_non_finite_value_rejected(self) -> None:
        """Test that NaN samples are rejected."""
        output = TrialOutput(WorkloadKind.file_delete, elapsed_seconds=float("nan"))
        with pytest.raises(ToolOutputError):
            SampleCollector().collect(Metric.file_delete_time, output)
