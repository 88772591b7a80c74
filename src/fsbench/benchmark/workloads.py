"""Workload invocation.

Block I/O workloads are delegated to external generators (``dd`` for
sequential transfers, ``fio`` for random I/O); metadata workloads are
plain loops timed in-process. External invocations are bounded by a
hard timeout and pinned to one CPU core with ``taskset`` when it is
available. Each generator runs in its own session so a timed-out trial
is killed together with any workers it forked.
"""

from __future__ import annotations

import os
import shutil
import signal
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from fsbench.benchmark.exceptions import TrialError, TrialTimeout
from fsbench.config.defaults import SEQUENTIAL_FILE_BYTES
from fsbench.config.settings import WorkloadSettings
from fsbench.config.validators import parse_size
from fsbench.logging_config import get_logger
from fsbench.models.config import RunConfig
from fsbench.models.enums import WorkloadKind

__all__ = ["TrialOutput", "WorkloadExecutor"]

logger = get_logger(__name__)

SEQUENTIAL_FILE = "seq_testfile"
RANDOM_IO_FILE = "fio_temp"
SMALL_FILES_DIR = "small_files"
DIRS_DIR = "dirs"

_PREFILL_BLOCK = 1024**2

# fio --rw value and job name per random workload
_FIO_PATTERNS = {
    WorkloadKind.random_write: ("randwrite", "randwrite"),
    WorkloadKind.random_read: ("randread", "randread"),
    WorkloadKind.mixed_read_write: ("randrw", "mixed"),
}


@dataclass(frozen=True)
class TrialOutput:
    """Raw result of one workload trial.

    Attributes:
        kind: Workload that ran.
        text: Tool output (free text or the JSON report).
        elapsed_seconds: Wall-clock duration of the measured operation.

    """

    kind: WorkloadKind
    text: str = ""
    elapsed_seconds: float = 0.0


class WorkloadExecutor:
    """Runs single workload trials inside the benchmark's test directory.

    Attributes:
        config: Run configuration.
        settings: Workload invocation settings.
        test_dir: Scratch directory on the filesystem under test.
        artifacts_dir: Directory receiving generator reports.

    """

    def __init__(
        self,
        config: RunConfig,
        settings: WorkloadSettings,
        test_dir: Path,
        artifacts_dir: Path,
        which: Callable[[str], str | None] = shutil.which,
        popen: Callable[..., subprocess.Popen[str]] = subprocess.Popen,
    ) -> None:
        """Initialize the executor.

        Args:
            config: Run configuration.
            settings: Workload invocation settings.
            test_dir: Scratch directory on the filesystem under test.
            artifacts_dir: Directory receiving generator reports.
            which: Executable lookup, replaceable in tests.
            popen: Process launcher, replaceable in tests.

        """
        self.config = config
        self.settings = settings
        self.test_dir = test_dir
        self.artifacts_dir = artifacts_dir
        self._popen = popen
        self._cpu_prefix: list[str] = (
            ["taskset", "-c", str(settings.pin_cpu)] if which("taskset") else []
        )

    def prepare(self, kind: WorkloadKind) -> None:
        """Set up a trial's input before caches are evicted.

        The random read trial reads a file that must exist beforehand;
        it is written here so the eviction that follows leaves it cold.

        Args:
            kind: Workload about to run.

        """
        if kind is not WorkloadKind.random_read:
            return

        size = parse_size(self.settings.fio_size)
        command = [
            "dd",
            "if=/dev/zero",
            f"of={self.test_dir / RANDOM_IO_FILE}",
            f"bs={_PREFILL_BLOCK}",
            f"count={max(1, size // _PREFILL_BLOCK)}",
            "conv=fdatasync",
        ]
        try:
            self._invoke(command)
        except TrialError as e:
            logger.warning("prefill_failed", error=str(e))

    def run(self, kind: WorkloadKind, run_index: int) -> TrialOutput:
        """Run one trial of ``kind``.

        Args:
            kind: Workload to run.
            run_index: 1-based run number, used to name reports.

        Returns:
            The trial's raw output.

        Raises:
            TrialTimeout: If an external generator exceeded the time limit.
            TrialError: If the trial could not be carried out.

        """
        logger.debug("trial_starting", workload=kind.value, run=run_index)

        if kind is WorkloadKind.sequential_write:
            return TrialOutput(kind, text=self._invoke(self.sequential_command(kind)))
        if kind is WorkloadKind.sequential_read:
            try:
                return TrialOutput(kind, text=self._invoke(self.sequential_command(kind)))
            finally:
                self._remove(self.test_dir / SEQUENTIAL_FILE)
        if kind in _FIO_PATTERNS:
            try:
                return self._run_random(kind, run_index)
            finally:
                self._remove(self.test_dir / RANDOM_IO_FILE)
        if kind is WorkloadKind.file_create:
            return TrialOutput(kind, elapsed_seconds=self._create_files())
        if kind is WorkloadKind.file_delete:
            return TrialOutput(kind, elapsed_seconds=self._delete_files())
        return TrialOutput(kind, elapsed_seconds=self._create_dirs())

    def sequential_command(self, kind: WorkloadKind) -> list[str]:
        """Return the ``dd`` command line of a sequential workload."""
        block = self.config.block_size_bytes
        path = self.test_dir / SEQUENTIAL_FILE
        if kind is WorkloadKind.sequential_write:
            return [
                "dd",
                "if=/dev/zero",
                f"of={path}",
                f"bs={block}",
                f"count={max(1, SEQUENTIAL_FILE_BYTES // block)}",
                "conv=fdatasync",
                "oflag=direct",
            ]
        return ["dd", f"if={path}", "of=/dev/null", f"bs={block}", "iflag=direct"]

    def report_path(self, kind: WorkloadKind, run_index: int) -> Path:
        """Return where the random I/O report of a trial is written."""
        _, name = _FIO_PATTERNS[kind]
        return self.artifacts_dir / f"fio_{name}_run{run_index}.json"

    def random_command(self, kind: WorkloadKind, run_index: int) -> list[str]:
        """Return the ``fio`` command line of a random I/O workload."""
        rw, name = _FIO_PATTERNS[kind]
        command = [
            "fio",
            f"--name={name}",
            "--ioengine=libaio",
            f"--iodepth={self.settings.io_depth}",
            f"--rw={rw}",
            f"--bs={self.config.block_size_bytes}",
            "--direct=1",
            f"--size={self.settings.fio_size}",
            f"--numjobs={self.config.num_jobs}",
            f"--runtime={self.settings.fio_runtime_seconds}",
            "--time_based",
            "--group_reporting",
            f"--directory={self.test_dir}",
            f"--filename={RANDOM_IO_FILE}",
            "--output-format=json",
            f"--output={self.report_path(kind, run_index)}",
        ]
        if kind is WorkloadKind.mixed_read_write:
            command.insert(5, f"--rwmixread={self.settings.mixed_read_percent}")
        return command

    def _run_random(self, kind: WorkloadKind, run_index: int) -> TrialOutput:
        report = self.report_path(kind, run_index)
        report.parent.mkdir(parents=True, exist_ok=True)
        self._invoke(self.random_command(kind, run_index))
        try:
            return TrialOutput(kind, text=report.read_text(encoding="utf-8"))
        except OSError as e:
            raise TrialError(f"No report written by {kind.value} trial: {e}") from e

    def _invoke(self, command: list[str]) -> str:
        full = [*self._cpu_prefix, *command]
        timeout = self.settings.trial_timeout_seconds
        try:
            process = self._popen(
                full,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                start_new_session=True,
            )
        except OSError as e:
            raise TrialError(f"Failed to launch {command[0]}: {e}") from e

        try:
            stdout, _ = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            _kill_group(process)
            raise TrialTimeout(f"{command[0]} exceeded {timeout}s") from e

        if process.returncode != 0:
            logger.warning(
                "workload_tool_failed",
                command=command[0],
                returncode=process.returncode,
            )
        return stdout or ""

    def _create_files(self) -> float:
        target = self.test_dir / SMALL_FILES_DIR
        try:
            target.mkdir(parents=True, exist_ok=True)
            start = time.perf_counter()
            for i in range(1, self.config.num_files + 1):
                (target / f"file_{i}").write_text("test\n", encoding="utf-8")
            os.sync()
            return time.perf_counter() - start
        except OSError as e:
            raise TrialError(f"File creation failed: {e}") from e

    def _delete_files(self) -> float:
        target = self.test_dir / SMALL_FILES_DIR
        if not target.is_dir():
            raise TrialError(f"No files to delete in {target}")
        try:
            start = time.perf_counter()
            shutil.rmtree(target)
            os.sync()
            return time.perf_counter() - start
        except OSError as e:
            raise TrialError(f"File deletion failed: {e}") from e

    def _create_dirs(self) -> float:
        target = self.test_dir / DIRS_DIR
        try:
            target.mkdir(parents=True, exist_ok=True)
            start = time.perf_counter()
            for i in range(1, self.config.num_files + 1):
                (target / f"dir_{i}").mkdir()
            os.sync()
            return time.perf_counter() - start
        except OSError as e:
            raise TrialError(f"Directory creation failed: {e}") from e
        finally:
            shutil.rmtree(target, ignore_errors=True)

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug("artifact_cleanup_failed", path=str(path), error=str(e))


def _kill_group(process: subprocess.Popen[str]) -> None:
    """Kill a timed-out generator together with the workers it forked."""
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except OSError:
        process.kill()
    process.communicate()
