"""Application settings using pydantic-settings.

This module provides environment variable support for configuration
using pydantic-settings. Settings can be overridden via environment
variables with the appropriate prefix, and by the YAML settings file
handled in ``fsbench.config.loader``.

Environment Variables:
    FSBENCH_MOUNT_POINT: Mount point of the filesystem under test
    FSBENCH_NUM_RUNS: Number of repetitions of the workload list
    FSBENCH_NUM_FILES: Files created/deleted by the metadata workloads
    FSBENCH_NUM_JOBS: Parallel jobs passed to the random I/O generator
    FSBENCH_BLOCK_SIZE: Block size for all block I/O workloads
    FSBENCH_RESULTS_DIR: Root directory for stored benchmark records
    FSBENCH_WORKLOAD_TRIAL_TIMEOUT_SECONDS: Hard limit per external trial
    FSBENCH_WORKLOAD_PIN_CPU: CPU core workloads are pinned to
    FSBENCH_WORKLOAD_FIO_RUNTIME_SECONDS: Duration of each random I/O trial
    FSBENCH_WORKLOAD_FIO_SIZE: File size used by random I/O trials
    FSBENCH_WORKLOAD_IO_DEPTH: Queue depth of random I/O trials
    FSBENCH_WORKLOAD_MIXED_READ_PERCENT: Read share of the mixed workload
    FSBENCH_ENV_SETTLE_SECONDS: Pause after each cache eviction
    FSBENCH_ENV_MIN_FREE_GIB: Free space required on the mount point
    FSBENCH_ENV_MONITOR_INTERVAL_SECONDS: Background sampling interval
    FSBENCH_ENV_KERNEL_LOG_LINES: Kernel log lines kept after each run
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fsbench.config.defaults import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_FIO_RUNTIME_SECONDS,
    DEFAULT_FIO_SIZE,
    DEFAULT_IO_DEPTH,
    DEFAULT_KERNEL_LOG_LINES,
    DEFAULT_MIN_FREE_GIB,
    DEFAULT_MIXED_READ_PERCENT,
    DEFAULT_MONITOR_INTERVAL_SECONDS,
    DEFAULT_MOUNT_POINT,
    DEFAULT_NUM_FILES,
    DEFAULT_NUM_JOBS,
    DEFAULT_NUM_RUNS,
    DEFAULT_PIN_CPU,
    DEFAULT_RESULTS_DIR,
    DEFAULT_SETTLE_SECONDS,
    DEFAULT_TRIAL_TIMEOUT_SECONDS,
    NUM_FILES_MAX,
    NUM_FILES_MIN,
    NUM_JOBS_MAX,
    NUM_JOBS_MIN,
    NUM_RUNS_MAX,
    NUM_RUNS_MIN,
)
from fsbench.config.validators import parse_size

__all__ = [
    "EnvironmentSettings",
    "Settings",
    "WorkloadSettings",
    "get_settings",
]


class WorkloadSettings(BaseSettings):
    """Settings for workload invocation.

    Attributes:
        trial_timeout_seconds: Hard limit for one external workload trial.
        pin_cpu: CPU core the workloads are pinned to.
        fio_runtime_seconds: Duration of each random I/O trial.
        fio_size: File size used by the random I/O trials.
        io_depth: Queue depth of the random I/O trials.
        mixed_read_percent: Read share of the mixed read/write workload.

    """

    model_config = SettingsConfigDict(
        env_prefix="FSBENCH_WORKLOAD_",
        extra="ignore",
    )

    trial_timeout_seconds: int = Field(
        default=DEFAULT_TRIAL_TIMEOUT_SECONDS,
        ge=1,
        description="Hard limit in seconds for one external workload trial",
    )
    pin_cpu: int = Field(
        default=DEFAULT_PIN_CPU,
        ge=0,
        description="CPU core the workloads are pinned to",
    )
    fio_runtime_seconds: int = Field(
        default=DEFAULT_FIO_RUNTIME_SECONDS,
        ge=1,
        description="Duration in seconds of each random I/O trial",
    )
    fio_size: str = Field(
        default=DEFAULT_FIO_SIZE,
        description="File size used by the random I/O trials",
    )
    io_depth: int = Field(
        default=DEFAULT_IO_DEPTH,
        ge=1,
        le=1024,
        description="Queue depth of the random I/O trials",
    )
    mixed_read_percent: int = Field(
        default=DEFAULT_MIXED_READ_PERCENT,
        ge=0,
        le=100,
        description="Read share of the mixed read/write workload",
    )

    @field_validator("fio_size")
    @classmethod
    def validate_fio_size(cls, v: str) -> str:
        """Reject sizes the random I/O generator would not understand."""
        parse_size(v)
        return v


class EnvironmentSettings(BaseSettings):
    """Settings for host environment control and diagnostics.

    Attributes:
        settle_seconds: Pause after each cache eviction.
        min_free_gib: Free space required on the mount point.
        monitor_interval_seconds: Interval of the background samplers.
        kernel_log_lines: Kernel log lines kept after each run.

    """

    model_config = SettingsConfigDict(
        env_prefix="FSBENCH_ENV_",
        extra="ignore",
    )

    settle_seconds: float = Field(
        default=DEFAULT_SETTLE_SECONDS,
        ge=0,
        description="Pause in seconds after each cache eviction",
    )
    min_free_gib: int = Field(
        default=DEFAULT_MIN_FREE_GIB,
        ge=0,
        description="Free space in GiB required on the mount point",
    )
    monitor_interval_seconds: float = Field(
        default=DEFAULT_MONITOR_INTERVAL_SECONDS,
        gt=0,
        description="Interval in seconds of the background samplers",
    )
    kernel_log_lines: int = Field(
        default=DEFAULT_KERNEL_LOG_LINES,
        ge=0,
        description="Kernel log lines kept after each run",
    )


class Settings(BaseSettings):
    """Root settings container.

    Holds the run defaults offered to the user and aggregates the
    subsystem settings. Use get_settings() to access the cached
    singleton instance.

    Attributes:
        mount_point: Mount point of the filesystem under test.
        num_runs: Number of repetitions of the workload list.
        num_files: Files created/deleted by the metadata workloads.
        num_jobs: Parallel jobs passed to the random I/O generator.
        block_size: Block size for all block I/O workloads.
        results_dir: Root directory for stored benchmark records.
        workload: Workload invocation settings.
        environment: Environment control settings.

    """

    model_config = SettingsConfigDict(
        env_prefix="FSBENCH_",
        extra="ignore",
    )

    mount_point: Path = Field(default=DEFAULT_MOUNT_POINT)
    num_runs: int = Field(default=DEFAULT_NUM_RUNS, ge=NUM_RUNS_MIN, le=NUM_RUNS_MAX)
    num_files: int = Field(
        default=DEFAULT_NUM_FILES, ge=NUM_FILES_MIN, le=NUM_FILES_MAX
    )
    num_jobs: int = Field(default=DEFAULT_NUM_JOBS, ge=NUM_JOBS_MIN, le=NUM_JOBS_MAX)
    block_size: str = Field(default=DEFAULT_BLOCK_SIZE)
    results_dir: Path = Field(default=DEFAULT_RESULTS_DIR)
    workload: WorkloadSettings = Field(default_factory=WorkloadSettings)
    environment: EnvironmentSettings = Field(default_factory=EnvironmentSettings)

    @field_validator("block_size")
    @classmethod
    def validate_block_size(cls, v: str) -> str:
        """Require a positive size such as ``4k`` or ``1M``."""
        parse_size(v)
        return v

    @property
    def resolved_results_dir(self) -> Path:
        """Results directory with ``~`` expanded."""
        return self.results_dir.expanduser()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings singleton.

    Returns:
        The Settings instance with values from environment variables.

    """
    return Settings()
