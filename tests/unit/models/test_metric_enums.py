"""Unit tests for workload and metric enums."""

from fsbench.models.enums import BetterDirection, Metric, MetricUnit, SampleSource, WorkloadKind


class TestWorkloadKind:
    """Tests for WorkloadKind."""

    def test_execution_order(self) -> None:
        """Test that workloads are declared in execution order."""
        assert [kind.value for kind in WorkloadKind] == [
            "sequential_write",
            "sequential_read",
            "random_write",
            "random_read",
            "mixed_read_write",
            "file_create",
            "file_delete",
            "dir_create",
        ]

    def test_cache_sensitivity(self) -> None:
        """Test that only block I/O workloads need cache eviction."""
        sensitive = {kind for kind in WorkloadKind if kind.cache_sensitive}

        assert sensitive == {
            WorkloadKind.sequential_write,
            WorkloadKind.sequential_read,
            WorkloadKind.random_write,
            WorkloadKind.random_read,
            WorkloadKind.mixed_read_write,
        }

    def test_mixed_produces_two_metrics(self) -> None:
        """Test that the mixed workload yields read and write IOPS."""
        assert WorkloadKind.mixed_read_write.metrics == (
            Metric.mixed_read_iops,
            Metric.mixed_write_iops,
        )

    def test_every_metric_has_one_workload(self) -> None:
        """Test that workloads partition the metrics."""
        produced = [metric for kind in WorkloadKind for metric in kind.metrics]

        assert sorted(produced) == sorted(Metric)
        assert len(produced) == 9


class TestMetric:
    """Tests for Metric."""

    def test_units_and_sources(self) -> None:
        """Test unit and extraction strategy per metric family."""
        assert Metric.seq_read_mbps.unit is MetricUnit.mbps
        assert Metric.seq_read_mbps.source is SampleSource.throughput_text
        assert Metric.rand_write_iops.unit is MetricUnit.iops
        assert Metric.rand_write_iops.source is SampleSource.iops_field
        assert Metric.dir_create_time.unit is MetricUnit.seconds
        assert Metric.dir_create_time.source is SampleSource.elapsed

    def test_elapsed_time_is_lower_better(self) -> None:
        """Test that only elapsed-time metrics prefer lower values."""
        lower = {m for m in Metric if m.better_direction is BetterDirection.lower}

        assert lower == {
            Metric.file_create_time,
            Metric.file_delete_time,
            Metric.dir_create_time,
        }

    def test_io_direction(self) -> None:
        """Test the report section read for IOPS metrics."""
        assert Metric.rand_read_iops.io_direction == "read"
        assert Metric.mixed_write_iops.io_direction == "write"
        assert Metric.seq_write_mbps.io_direction is None
