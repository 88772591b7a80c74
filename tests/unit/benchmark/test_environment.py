"""Unit tests for host environment control.

Tests run against a fake sysfs/procfs tree in a temporary directory.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from fsbench.benchmark.environment import (
    CPUFREQ_BOOST,
    GOVERNOR_FILE,
    INTEL_NO_TURBO,
    EnvironmentController,
)
from fsbench.models.enums import PriorityMode
from fsbench.models.environment import EnvironmentSnapshot


def _write(path: Path, value: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(value + "\n")


@pytest.fixture
def cpu_root(tmp_path: Path) -> Path:
    """Create a two-core CPU sysfs tree in powersave with turbo enabled."""
    root = tmp_path / "cpu"
    for core in ("cpu0", "cpu1"):
        _write(root / core / GOVERNOR_FILE, "powersave")
    _write(root / INTEL_NO_TURBO, "0")
    return root


@pytest.fixture
def vm_root(tmp_path: Path) -> Path:
    """Create a VM procfs tree."""
    root = tmp_path / "vm"
    _write(root / "drop_caches", "0")
    _write(root / "compact_memory", "0")
    return root


@pytest.fixture
def controller(cpu_root: Path, vm_root: Path) -> EnvironmentController:
    """Create a controller bound to the fake trees, with no settle delay."""
    return EnvironmentController(
        cpu_root=cpu_root, vm_root=vm_root, settle_seconds=0, sleep=MagicMock()
    )


def _governors(cpu_root: Path) -> list[str]:
    return [
        (cpu_root / core / GOVERNOR_FILE).read_text().strip() for core in ("cpu0", "cpu1")
    ]


class TestPrepare:
    """Tests for EnvironmentController.prepare."""

    def test_pins_governor_and_disables_turbo(
        self, controller: EnvironmentController, cpu_root: Path
    ) -> None:
        """Test that all cores switch to performance and turbo is disabled."""
        snapshot = controller.prepare()

        assert snapshot.governor == "powersave"
        assert snapshot.boost_control == INTEL_NO_TURBO
        assert snapshot.boost_state == "0"
        assert _governors(cpu_root) == ["performance", "performance"]
        assert (cpu_root / INTEL_NO_TURBO).read_text().strip() == "1"

    def test_already_performance_is_left_alone(
        self, controller: EnvironmentController, cpu_root: Path
    ) -> None:
        """Test that a governor already in performance mode is not recorded."""
        for core in ("cpu0", "cpu1"):
            _write(cpu_root / core / GOVERNOR_FILE, "performance")

        snapshot = controller.prepare()

        assert snapshot.governor == "none"
        assert snapshot.governor_changed is False

    def test_missing_cpufreq_records_none(self, tmp_path: Path, vm_root: Path) -> None:
        """Test that hosts without frequency scaling change nothing."""
        controller = EnvironmentController(
            cpu_root=tmp_path / "empty", vm_root=vm_root, settle_seconds=0
        )

        snapshot = controller.prepare()

        assert snapshot == EnvironmentSnapshot()
        assert snapshot.boost_changed is False

    def test_cpufreq_boost_fallback(self, tmp_path: Path, vm_root: Path) -> None:
        """Test that the generic boost knob is used without intel_pstate."""
        root = tmp_path / "cpu"
        _write(root / "cpu0" / GOVERNOR_FILE, "schedutil")
        _write(root / CPUFREQ_BOOST, "1")
        controller = EnvironmentController(cpu_root=root, vm_root=vm_root, settle_seconds=0)

        snapshot = controller.prepare()

        assert snapshot.boost_control == CPUFREQ_BOOST
        assert snapshot.boost_state == "1"
        assert (root / CPUFREQ_BOOST).read_text().strip() == "0"

    def test_boost_already_disabled_is_not_recorded(
        self, controller: EnvironmentController, cpu_root: Path
    ) -> None:
        """Test that turbo already off is not recorded as a change."""
        _write(cpu_root / INTEL_NO_TURBO, "1")

        snapshot = controller.prepare()

        assert snapshot.boost_changed is False


class TestRestore:
    """Tests for EnvironmentController.restore."""

    def test_restores_prior_state(
        self, controller: EnvironmentController, cpu_root: Path
    ) -> None:
        """Test that governor and turbo return to their prior values."""
        snapshot = controller.prepare()

        failures = controller.restore(snapshot)

        assert failures == []
        assert _governors(cpu_root) == ["powersave", "powersave"]
        assert (cpu_root / INTEL_NO_TURBO).read_text().strip() == "0"

    def test_second_restore_writes_nothing(self, controller: EnvironmentController) -> None:
        """Test that restoring twice is idempotent."""
        snapshot = controller.prepare()
        controller.restore(snapshot)

        with patch.object(
            controller, "_write_control", wraps=controller._write_control
        ) as spy:
            failures = controller.restore(snapshot)

        assert failures == []
        assert spy.call_count == 0

    def test_unchanged_snapshot_writes_nothing(
        self, controller: EnvironmentController
    ) -> None:
        """Test that an empty snapshot restores nothing."""
        with patch.object(
            controller, "_write_control", wraps=controller._write_control
        ) as spy:
            controller.restore(EnvironmentSnapshot())

        assert spy.call_count == 0

    def test_governor_failure_does_not_block_boost(
        self, controller: EnvironmentController, cpu_root: Path
    ) -> None:
        """Test that each restore step is attempted independently."""
        snapshot = controller.prepare()
        original = controller._write_control

        def _failing(path: Path, value: str) -> None:
            if path.name == "scaling_governor":
                raise PermissionError("read-only")
            original(path, value)

        with patch.object(controller, "_write_control", side_effect=_failing):
            failures = controller.restore(snapshot)

        assert len(failures) == 1
        assert failures[0].startswith("governor")
        assert (cpu_root / INTEL_NO_TURBO).read_text().strip() == "0"


class TestEvictCaches:
    """Tests for EnvironmentController.evict_caches."""

    def test_drops_caches_and_settles(self, cpu_root: Path, vm_root: Path) -> None:
        """Test that the page cache is dropped and the system settles."""
        sleep = MagicMock()
        controller = EnvironmentController(
            cpu_root=cpu_root, vm_root=vm_root, settle_seconds=3.0, sleep=sleep
        )

        with patch("fsbench.benchmark.environment.os.sync") as sync:
            controller.evict_caches()

        sync.assert_called_once()
        assert (vm_root / "drop_caches").read_text() == "3"
        assert (vm_root / "compact_memory").read_text() == "1"
        sleep.assert_called_once_with(3.0)

    def test_missing_controls_are_ignored(self, tmp_path: Path, cpu_root: Path) -> None:
        """Test that eviction without procfs access does not raise."""
        controller = EnvironmentController(
            cpu_root=cpu_root, vm_root=tmp_path / "missing", settle_seconds=0
        )

        with patch("fsbench.benchmark.environment.os.sync"):
            controller.evict_caches()


class TestPriorityAndCounters:
    """Tests for priority, governor and throttle queries."""

    def test_realtime_priority(self, controller: EnvironmentController) -> None:
        """Test that real-time scheduling is preferred."""
        with patch("fsbench.benchmark.environment.os.sched_setscheduler") as setsched:
            assert controller.raise_priority() is PriorityMode.realtime
        setsched.assert_called_once()

    def test_falls_back_to_niceness(self, controller: EnvironmentController) -> None:
        """Test that a refused real-time request falls back to niceness."""
        with (
            patch(
                "fsbench.benchmark.environment.os.sched_setscheduler",
                side_effect=PermissionError,
            ),
            patch("fsbench.benchmark.environment.os.setpriority") as setprio,
        ):
            assert controller.raise_priority() is PriorityMode.nice
        setprio.assert_called_once()

    def test_unchanged_when_everything_refused(
        self, controller: EnvironmentController
    ) -> None:
        """Test that priority failures are never fatal."""
        with (
            patch(
                "fsbench.benchmark.environment.os.sched_setscheduler",
                side_effect=PermissionError,
            ),
            patch(
                "fsbench.benchmark.environment.os.setpriority",
                side_effect=PermissionError,
            ),
        ):
            assert controller.raise_priority() is PriorityMode.unchanged

    def test_current_governor(self, controller: EnvironmentController) -> None:
        """Test that the governor of CPU 0 is reported."""
        assert controller.current_governor() == "powersave"

    def test_throttle_count_sums_cores(
        self, controller: EnvironmentController, cpu_root: Path
    ) -> None:
        """Test that throttle counters of all cores are summed."""
        _write(cpu_root / "cpu0" / "thermal_throttle" / "core_throttle_count", "3")
        _write(cpu_root / "cpu1" / "thermal_throttle" / "core_throttle_count", "2")

        assert controller.throttle_count() == 5

    def test_throttle_count_unavailable(self, controller: EnvironmentController) -> None:
        """Test that missing counters report None."""
        assert controller.throttle_count() is None
