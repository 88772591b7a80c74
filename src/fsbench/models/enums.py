"""Enumeration types for fsbench.

This module defines all enum types used throughout the benchmark engine,
including workload kinds, metrics, run states and priority modes.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "BetterDirection",
    "Metric",
    "MetricUnit",
    "PriorityMode",
    "RunState",
    "SampleSource",
    "WorkloadKind",
]


class BetterDirection(str, Enum):
    """Which end of a metric's range is favorable.

    Attributes:
        higher: Larger values are better (throughput, IOPS).
        lower: Smaller values are better (elapsed time).
    """

    higher = "higher"
    lower = "lower"


class MetricUnit(str, Enum):
    """Unit a metric is reported in."""

    mbps = "MB/s"
    iops = "IOPS"
    seconds = "s"


class SampleSource(str, Enum):
    """How a sample is extracted from a trial's output.

    Attributes:
        throughput_text: Last ``<number> <K|M|G>B/s`` token in free text.
        iops_field: Numeric IOPS field of structured generator output.
        elapsed: Wall-clock duration measured around the operation.
    """

    throughput_text = "throughput_text"
    iops_field = "iops_field"
    elapsed = "elapsed"


class WorkloadKind(str, Enum):
    """The benchmark workloads, in execution order.

    Attributes:
        sequential_write: Streaming direct-I/O write of a large file.
        sequential_read: Streaming direct-I/O read of that file.
        random_write: Random 4k-class writes from the I/O generator.
        random_read: Random reads of a prefilled file.
        mixed_read_write: Random mixed reads and writes.
        file_create: Creation of many small files.
        file_delete: Deletion of those files.
        dir_create: Creation of many directories.
    """

    sequential_write = "sequential_write"
    sequential_read = "sequential_read"
    random_write = "random_write"
    random_read = "random_read"
    mixed_read_write = "mixed_read_write"
    file_create = "file_create"
    file_delete = "file_delete"
    dir_create = "dir_create"

    @property
    def metrics(self) -> tuple[Metric, ...]:
        """Metrics produced by one trial of this workload."""
        return tuple(m for m in Metric if m.workload is self)

    @property
    def cache_sensitive(self) -> bool:
        """Whether caches must be evicted before a trial."""
        return self not in _METADATA_WORKLOADS

    @property
    def label(self) -> str:
        """Human-readable workload name."""
        return self.value.replace("_", " ").title()


_METADATA_WORKLOADS = frozenset(
    {WorkloadKind.file_create, WorkloadKind.file_delete, WorkloadKind.dir_create}
)


class Metric(str, Enum):
    """Persisted result keys, one per measured quantity."""

    seq_write_mbps = "seq_write_mbps"
    seq_read_mbps = "seq_read_mbps"
    rand_write_iops = "rand_write_iops"
    rand_read_iops = "rand_read_iops"
    mixed_read_iops = "mixed_read_iops"
    mixed_write_iops = "mixed_write_iops"
    file_create_time = "file_create_time"
    file_delete_time = "file_delete_time"
    dir_create_time = "dir_create_time"

    @property
    def workload(self) -> WorkloadKind:
        """Workload whose trials produce this metric."""
        return _METRIC_WORKLOADS[self]

    @property
    def unit(self) -> MetricUnit:
        """Unit the metric is reported in."""
        if self.value.endswith("_mbps"):
            return MetricUnit.mbps
        if self.value.endswith("_iops"):
            return MetricUnit.iops
        return MetricUnit.seconds

    @property
    def source(self) -> SampleSource:
        """Extraction strategy for this metric."""
        return {
            MetricUnit.mbps: SampleSource.throughput_text,
            MetricUnit.iops: SampleSource.iops_field,
            MetricUnit.seconds: SampleSource.elapsed,
        }[self.unit]

    @property
    def better_direction(self) -> BetterDirection:
        """Elapsed times are lower-is-better, everything else higher."""
        if self.unit is MetricUnit.seconds:
            return BetterDirection.lower
        return BetterDirection.higher

    @property
    def io_direction(self) -> str | None:
        """``read`` or ``write`` section of the generator report, for IOPS metrics."""
        if self.unit is not MetricUnit.iops:
            return None
        return "read" if "_read_" in self.value else "write"

    @property
    def label(self) -> str:
        """Human-readable metric name."""
        return _METRIC_LABELS[self]


_METRIC_WORKLOADS = {
    Metric.seq_write_mbps: WorkloadKind.sequential_write,
    Metric.seq_read_mbps: WorkloadKind.sequential_read,
    Metric.rand_write_iops: WorkloadKind.random_write,
    Metric.rand_read_iops: WorkloadKind.random_read,
    Metric.mixed_read_iops: WorkloadKind.mixed_read_write,
    Metric.mixed_write_iops: WorkloadKind.mixed_read_write,
    Metric.file_create_time: WorkloadKind.file_create,
    Metric.file_delete_time: WorkloadKind.file_delete,
    Metric.dir_create_time: WorkloadKind.dir_create,
}

_METRIC_LABELS = {
    Metric.seq_write_mbps: "Sequential Write",
    Metric.seq_read_mbps: "Sequential Read",
    Metric.rand_write_iops: "Random Write",
    Metric.rand_read_iops: "Random Read",
    Metric.mixed_read_iops: "Mixed Read",
    Metric.mixed_write_iops: "Mixed Write",
    Metric.file_create_time: "File Creation",
    Metric.file_delete_time: "File Deletion",
    Metric.dir_create_time: "Directory Creation",
}


class RunState(str, Enum):
    """Lifecycle of one benchmark execution.

    Attributes:
        idle: Created, not started.
        preflight: Checking privileges, tools, free space and writability.
        environment_setup: Mutating host state and starting monitors.
        running: Executing workload trials.
        teardown: Restoring host state and releasing resources.
        summarized: Statistics computed and reported.
        persisted: Record saved; terminal.
        failed: Aborted; terminal.
    """

    idle = "idle"
    preflight = "preflight"
    environment_setup = "environment_setup"
    running = "running"
    teardown = "teardown"
    summarized = "summarized"
    persisted = "persisted"
    failed = "failed"


class PriorityMode(str, Enum):
    """Scheduling priority obtained for the benchmark process."""

    realtime = "realtime"
    nice = "nice"
    unchanged = "unchanged"
