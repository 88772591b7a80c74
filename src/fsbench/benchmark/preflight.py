"""Preflight checks run before any host state is touched.

Checks are run in a fixed order (privileges, required tools, free
space, writability) and every problem is collected so the user sees
all of them at once. Missing optional tools are reported as warnings.
"""

from __future__ import annotations

import os
import shutil
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fsbench.benchmark.exceptions import PreflightError
from fsbench.benchmark.utils import format_bytes
from fsbench.config.defaults import DEFAULT_MIN_FREE_GIB
from fsbench.logging_config import get_logger

__all__ = [
    "OPTIONAL_TOOLS",
    "REQUIRED_TOOLS",
    "PreflightChecker",
    "PreflightReport",
]

logger = get_logger(__name__)

REQUIRED_TOOLS = ("dd", "fio")
OPTIONAL_TOOLS = ("iostat", "sensors", "taskset", "dmesg")

_WRITE_PROBE_NAME = ".fsbench_write_test"


@dataclass
class PreflightReport:
    """Outcome of the preflight checks.

    Attributes:
        blocking_issues: Problems that prevent the benchmark from running.
        warnings: Degradations that do not block the benchmark.
        free_bytes: Free space found on the target, if it could be read.

    """

    blocking_issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    free_bytes: int | None = None

    @property
    def can_proceed(self) -> bool:
        """Whether no blocking issue was found."""
        return not self.blocking_issues


class PreflightChecker:
    """Verifies the host and target directory can run a benchmark.

    Attributes:
        min_free_bytes: Free space required on the target.
        required_tools: Executables that must be on PATH.
        optional_tools: Executables whose absence only degrades the run.

    """

    def __init__(
        self,
        min_free_bytes: int = DEFAULT_MIN_FREE_GIB * 1024**3,
        required_tools: Sequence[str] = REQUIRED_TOOLS,
        optional_tools: Sequence[str] = OPTIONAL_TOOLS,
        which: Callable[[str], str | None] = shutil.which,
        disk_usage: Callable[[Path], Any] = shutil.disk_usage,
        geteuid: Callable[[], int] = os.geteuid,
    ) -> None:
        """Initialize the checker.

        Args:
            min_free_bytes: Free space required on the target.
            required_tools: Executables that must be on PATH.
            optional_tools: Executables whose absence only degrades the run.
            which: Executable lookup, replaceable in tests.
            disk_usage: Disk usage lookup, replaceable in tests.
            geteuid: Effective user id lookup, replaceable in tests.

        """
        self.min_free_bytes = min_free_bytes
        self.required_tools = tuple(required_tools)
        self.optional_tools = tuple(optional_tools)
        self._which = which
        self._disk_usage = disk_usage
        self._geteuid = geteuid

    def run(self, target: Path) -> PreflightReport:
        """Run every check and return the findings without raising.

        Args:
            target: Mount point of the filesystem under test.

        Returns:
            Report of blocking issues and warnings.

        """
        report = PreflightReport()

        if self._geteuid() != 0:
            report.blocking_issues.append("root privileges are required")

        for tool in self.required_tools:
            if self._which(tool) is None:
                report.blocking_issues.append(f"required tool not found: {tool}")
        for tool in self.optional_tools:
            if self._which(tool) is None:
                report.warnings.append(f"optional tool not found: {tool}")

        if not target.is_dir():
            report.blocking_issues.append(f"target directory does not exist: {target}")
            return report

        try:
            report.free_bytes = self._disk_usage(target).free
        except OSError as e:
            report.blocking_issues.append(f"cannot read free space of {target}: {e}")
        else:
            if report.free_bytes < self.min_free_bytes:
                report.blocking_issues.append(
                    f"insufficient free space on {target}: "
                    f"{format_bytes(report.free_bytes)} available, "
                    f"{format_bytes(self.min_free_bytes)} required"
                )

        probe = target / f"{_WRITE_PROBE_NAME}.{uuid.uuid4().hex[:8]}"
        try:
            probe.write_bytes(b"fsbench")
        except OSError as e:
            report.blocking_issues.append(f"target directory is not writable: {e}")
        else:
            probe.unlink(missing_ok=True)

        return report

    def check(self, target: Path) -> PreflightReport:
        """Run every check, raising if any blocking issue was found.

        Args:
            target: Mount point of the filesystem under test.

        Returns:
            The report, when the benchmark can proceed.

        Raises:
            PreflightError: Listing every blocking issue.

        """
        report = self.run(target)
        for warning in report.warnings:
            logger.warning("preflight_warning", detail=warning)

        if not report.can_proceed:
            logger.error("preflight_failed", issues=report.blocking_issues)
            raise PreflightError(report.blocking_issues)

        logger.info("preflight_passed", target=str(target), free_bytes=report.free_bytes)
        return report
