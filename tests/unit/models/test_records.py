"""Unit tests for result and configuration models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from fsbench.config.settings import Settings
from fsbench.models.config import RunConfig
from fsbench.models.enums import Metric
from fsbench.models.results import BenchmarkRecord, SampleSet, Statistics


class TestSampleSet:
    """Tests for SampleSet."""

    def test_append_and_missing(self) -> None:
        """Test that samples and missing trials are tracked separately."""
        sample_set = SampleSet(Metric.seq_write_mbps)
        sample_set.append(120)
        sample_set.mark_missing()

        assert sample_set.values == [120.0]
        assert len(sample_set) == 1
        assert sample_set.missing == 1

    @pytest.mark.parametrize("value", [-1.0, float("nan"), float("inf")])
    def test_rejects_invalid_samples(self, value: float) -> None:
        """Test that negative and non-finite samples are rejected."""
        with pytest.raises(ValueError):
            SampleSet(Metric.seq_write_mbps).append(value)


class TestRunConfig:
    """Tests for RunConfig."""

    def test_from_settings_with_overrides(self) -> None:
        """Test that explicit values win and None falls back to settings."""
        settings = Settings(num_runs=5, block_size="8k")

        config = RunConfig.from_settings(
            settings, name="tuned", num_runs=None, num_jobs=4, mount_point=Path("/mnt/t")
        )

        assert config.num_runs == 5
        assert config.num_jobs == 4
        assert config.block_size_bytes == 8192
        assert config.test_dir == Path("/mnt/t/benchmark")

    def test_rejects_empty_name(self) -> None:
        """Test that a benchmark needs a name."""
        with pytest.raises(ValidationError):
            RunConfig(name="", mount_point=Path("/mnt/t"))

    def test_rejects_out_of_range(self) -> None:
        """Test that run parameters are range-checked."""
        with pytest.raises(ValidationError):
            RunConfig(name="x", mount_point=Path("/mnt/t"), num_files=20000)

    def test_is_frozen(self) -> None:
        """Test that a run configuration cannot change once built."""
        config = RunConfig(name="x", mount_point=Path("/mnt/t"))

        with pytest.raises(ValidationError):
            config.num_runs = 2


class TestBenchmarkRecord:
    """Tests for BenchmarkRecord."""

    def test_from_statistics_fills_every_metric(self) -> None:
        """Test that all nine metrics are present, empty ones as None."""
        stats = Statistics(count=1, samples=(3.0,), best=3.0, median=3.0)

        record = BenchmarkRecord.from_statistics(
            config=RunConfig(name="x", mount_point=Path("/mnt/t")),
            timestamp="20240101_120000",
            kernel_version="6.8.0",
            device="/dev/sdb1",
            statistics={Metric.seq_read_mbps: stats},
            missing_samples={Metric.seq_read_mbps: 0, Metric.rand_read_iops: 2},
        )

        assert set(record.best_results) == set(Metric)
        assert record.best_results[Metric.seq_read_mbps] == 3.0
        assert record.median_results[Metric.dir_create_time] is None
        assert record.missing_samples == {Metric.rand_read_iops: 2}
        assert record.degraded is True

    def test_record_id_not_serialized(self, make_record) -> None:
        """Test that the store identifier stays out of the persisted form."""
        record = make_record()
        record.record_id = "20240101_120000_baseline"

        assert "record_id" not in record.model_dump()
