"""Run configuration model.

This module defines the immutable parameters of one benchmark execution.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator

from fsbench.config.defaults import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_NUM_FILES,
    DEFAULT_NUM_JOBS,
    DEFAULT_NUM_RUNS,
    NUM_FILES_MAX,
    NUM_FILES_MIN,
    NUM_JOBS_MAX,
    NUM_JOBS_MIN,
    NUM_RUNS_MAX,
    NUM_RUNS_MIN,
    TEST_DIR_NAME,
)
from fsbench.config.validators import parse_size
from fsbench.models.base import FrozenSchema

if TYPE_CHECKING:
    from fsbench.config.settings import Settings

__all__ = ["RunConfig"]


class RunConfig(FrozenSchema):
    """Parameters of one benchmark execution.

    Attributes:
        name: Benchmark name, used in the record directory name.
        mount_point: Mount point of the filesystem under test.
        num_runs: Repetitions of the full workload list.
        num_files: Files created and deleted by the metadata workloads.
        num_jobs: Parallel jobs for the random I/O generator.
        block_size: Block size for the block I/O workloads.

    """

    name: str = Field(..., min_length=1)
    mount_point: Path
    num_runs: int = Field(default=DEFAULT_NUM_RUNS, ge=NUM_RUNS_MIN, le=NUM_RUNS_MAX)
    num_files: int = Field(
        default=DEFAULT_NUM_FILES, ge=NUM_FILES_MIN, le=NUM_FILES_MAX
    )
    num_jobs: int = Field(default=DEFAULT_NUM_JOBS, ge=NUM_JOBS_MIN, le=NUM_JOBS_MAX)
    block_size: str = DEFAULT_BLOCK_SIZE

    @field_validator("block_size")
    @classmethod
    def validate_block_size(cls, v: str) -> str:
        """Require a positive size such as ``4k`` or ``1M``."""
        parse_size(v)
        return v

    @property
    def test_dir(self) -> Path:
        """Scratch directory on the mount point, removed after the run."""
        return self.mount_point / TEST_DIR_NAME

    @property
    def block_size_bytes(self) -> int:
        """Block size in bytes."""
        return parse_size(self.block_size)

    @classmethod
    def from_settings(cls, settings: Settings, name: str, **overrides: Any) -> RunConfig:
        """Build a run configuration from settings plus explicit overrides.

        Args:
            settings: Resolved application settings.
            name: Benchmark name.
            **overrides: Field values taking precedence over settings;
                ``None`` values are ignored.

        Returns:
            The run configuration.

        """
        values: dict[str, Any] = {
            "name": name,
            "mount_point": settings.mount_point,
            "num_runs": settings.num_runs,
            "num_files": settings.num_files,
            "num_jobs": settings.num_jobs,
            "block_size": settings.block_size,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
