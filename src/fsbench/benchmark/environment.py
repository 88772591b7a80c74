"""Host environment control around a benchmark.

The controller pins the CPU frequency governor to ``performance``,
disables frequency boost, raises the process priority and evicts the
page cache between trials. Every change to host state is recorded in an
EnvironmentSnapshot so that ``restore`` can undo it. Restoration is
best-effort per step and idempotent: a step whose control file already
holds the target value performs no write.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from pathlib import Path

from fsbench.benchmark.exceptions import RestorationFailure
from fsbench.config.defaults import (
    DEFAULT_SETTLE_SECONDS,
    FALLBACK_NICENESS,
    PERFORMANCE_GOVERNOR,
    REALTIME_PRIORITY,
)
from fsbench.logging_config import get_logger
from fsbench.models.enums import PriorityMode
from fsbench.models.environment import GOVERNOR_UNCHANGED, EnvironmentSnapshot

__all__ = ["CPU_SYSFS_ROOT", "VM_PROCFS_ROOT", "EnvironmentController"]

logger = get_logger(__name__)

CPU_SYSFS_ROOT = Path("/sys/devices/system/cpu")
VM_PROCFS_ROOT = Path("/proc/sys/vm")

GOVERNOR_FILE = "cpufreq/scaling_governor"
INTEL_NO_TURBO = "intel_pstate/no_turbo"
CPUFREQ_BOOST = "cpufreq/boost"
THROTTLE_COUNT_FILE = "thermal_throttle/core_throttle_count"

# (control file, value meaning "boost enabled", value that disables it)
_BOOST_CONTROLS = (
    (INTEL_NO_TURBO, "0", "1"),
    (CPUFREQ_BOOST, "1", "0"),
)


class EnvironmentController:
    """Applies and restores host preconditions for a benchmark.

    Attributes:
        cpu_root: CPU sysfs directory (``/sys/devices/system/cpu``).
        vm_root: VM procfs directory (``/proc/sys/vm``).
        settle_seconds: Pause after each cache eviction.

    """

    def __init__(
        self,
        cpu_root: Path = CPU_SYSFS_ROOT,
        vm_root: Path = VM_PROCFS_ROOT,
        settle_seconds: float = DEFAULT_SETTLE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the controller.

        Args:
            cpu_root: CPU sysfs directory.
            vm_root: VM procfs directory.
            settle_seconds: Pause after each cache eviction.
            sleep: Sleep function, replaceable in tests.

        """
        self.cpu_root = cpu_root
        self.vm_root = vm_root
        self.settle_seconds = settle_seconds
        self._sleep = sleep

    def prepare(self) -> EnvironmentSnapshot:
        """Switch the host into benchmark mode and record what was changed.

        Returns:
            Snapshot of the state that was replaced.

        """
        governor = self._pin_governor()
        boost_control, boost_state = self._disable_boost()

        snapshot = EnvironmentSnapshot(
            governor=governor,
            boost_control=boost_control,
            boost_state=boost_state,
        )
        logger.info(
            "environment_prepared",
            prior_governor=snapshot.governor,
            boost_control=snapshot.boost_control,
            prior_boost=snapshot.boost_state,
        )
        return snapshot

    def restore(self, snapshot: EnvironmentSnapshot) -> list[str]:
        """Undo the changes recorded in ``snapshot``.

        Each step is attempted even if an earlier one failed. Failures are
        logged and returned, never raised.

        Args:
            snapshot: Snapshot returned by prepare().

        Returns:
            Descriptions of the steps that failed.

        """
        failures: list[str] = []
        steps: list[tuple[str, Callable[[EnvironmentSnapshot], None]]] = [
            ("governor", self._restore_governor),
            ("boost", self._restore_boost),
        ]

        for step_name, step in steps:
            try:
                step(snapshot)
            except RestorationFailure as e:
                logger.warning("restore_step_failed", step=step_name, error=str(e))
                failures.append(f"{step_name}: {e}")

        if failures:
            logger.error("environment_partially_restored", failed_steps=len(failures))
        else:
            logger.info("environment_restored")
        return failures

    def evict_caches(self) -> None:
        """Flush dirty pages, drop the page cache and let the system settle.

        Failures (for example when not running as root) are logged and
        ignored.
        """
        os.sync()
        try:
            self._write_control(self.vm_root / "drop_caches", "3")
        except OSError as e:
            logger.debug("drop_caches_failed", error=str(e))

        compact = self.vm_root / "compact_memory"
        if compact.exists():
            try:
                self._write_control(compact, "1")
            except OSError as e:
                logger.debug("compact_memory_failed", error=str(e))

        if self.settle_seconds > 0:
            self._sleep(self.settle_seconds)

    def raise_priority(self) -> PriorityMode:
        """Give the current process real-time or high scheduling priority.

        Returns:
            The priority mode obtained. Failure is never fatal.

        """
        try:
            os.sched_setscheduler(0, os.SCHED_FIFO, os.sched_param(REALTIME_PRIORITY))
            logger.info("priority_raised", mode=PriorityMode.realtime.value)
            return PriorityMode.realtime
        except (AttributeError, OSError) as e:
            logger.debug("realtime_priority_unavailable", error=str(e))

        try:
            os.setpriority(os.PRIO_PROCESS, 0, FALLBACK_NICENESS)
            logger.info("priority_raised", mode=PriorityMode.nice.value)
            return PriorityMode.nice
        except (AttributeError, OSError) as e:
            logger.warning("priority_unchanged", error=str(e))
            return PriorityMode.unchanged

    def current_governor(self) -> str:
        """Return the governor of CPU 0, or ``"none"`` when unsupported."""
        path = self.cpu_root / "cpu0" / GOVERNOR_FILE
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError:
            return GOVERNOR_UNCHANGED

    def throttle_count(self) -> int | None:
        """Sum the thermal throttle counters of all cores.

        Returns:
            Total throttle events, or None when the counters are unavailable.

        """
        paths = sorted(self.cpu_root.glob(f"cpu[0-9]*/{THROTTLE_COUNT_FILE}"))
        if not paths:
            return None

        total = 0
        for path in paths:
            try:
                total += int(path.read_text(encoding="utf-8").strip() or 0)
            except (OSError, ValueError):
                continue
        return total

    def _governor_files(self) -> list[Path]:
        return sorted(self.cpu_root.glob(f"cpu[0-9]*/{GOVERNOR_FILE}"))

    def _pin_governor(self) -> str:
        prior = self.current_governor()
        if prior in (GOVERNOR_UNCHANGED, PERFORMANCE_GOVERNOR):
            return GOVERNOR_UNCHANGED

        changed = False
        for path in self._governor_files():
            try:
                self._write_control(path, PERFORMANCE_GOVERNOR)
                changed = True
            except OSError as e:
                logger.warning("governor_set_failed", path=str(path), error=str(e))

        return prior if changed else GOVERNOR_UNCHANGED

    def _disable_boost(self) -> tuple[str | None, str | None]:
        for control, enabled, disabled in _BOOST_CONTROLS:
            path = self.cpu_root / control
            if not path.exists():
                continue
            try:
                current = path.read_text(encoding="utf-8").strip()
                if current != enabled:
                    return None, None
                self._write_control(path, disabled)
            except OSError as e:
                logger.warning("boost_disable_failed", path=str(path), error=str(e))
                return None, None
            return control, current
        return None, None

    def _restore_governor(self, snapshot: EnvironmentSnapshot) -> None:
        if not snapshot.governor_changed:
            return

        errors: list[str] = []
        for path in self._governor_files():
            try:
                self._write_if_different(path, snapshot.governor)
            except OSError as e:
                errors.append(f"{path}: {e}")
        if errors:
            raise RestorationFailure("; ".join(errors))

    def _restore_boost(self, snapshot: EnvironmentSnapshot) -> None:
        if not snapshot.boost_changed:
            return

        assert snapshot.boost_control is not None and snapshot.boost_state is not None
        path = self.cpu_root / snapshot.boost_control
        try:
            self._write_if_different(path, snapshot.boost_state)
        except OSError as e:
            raise RestorationFailure(f"{path}: {e}") from e

    def _write_if_different(self, path: Path, value: str) -> None:
        if path.read_text(encoding="utf-8").strip() == value:
            return
        self._write_control(path, value)

    def _write_control(self, path: Path, value: str) -> None:
        path.write_text(value, encoding="utf-8")
        logger.debug("control_written", path=str(path), value=value)
