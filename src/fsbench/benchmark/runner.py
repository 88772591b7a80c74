"""Benchmark runner for executing the workload sequence.

This module orchestrates one benchmark execution: preflight checks,
environment setup, N runs of the fixed workload list, teardown,
summarization and persistence. Teardown (monitor shutdown, console
restore, environment restore, test directory removal) runs exactly once
on every exit path, including termination signals.
"""

from __future__ import annotations

import os
import shutil
import signal
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import FrameType

from fsbench.benchmark.collector import SampleCollector
from fsbench.benchmark.diagnostics import SystemInspector, kernel_version
from fsbench.benchmark.environment import EnvironmentController
from fsbench.benchmark.exceptions import (
    BenchmarkError,
    BenchmarkInterrupted,
    PreflightError,
    ToolOutputError,
    TrialError,
    TrialTimeout,
)
from fsbench.benchmark.monitors import (
    BackgroundMonitor,
    DiskActivityMonitor,
    TemperatureMonitor,
)
from fsbench.benchmark.preflight import PreflightChecker
from fsbench.benchmark.report import format_run_report, format_value
from fsbench.benchmark.state_machine import StateMachineMixin
from fsbench.benchmark.statistics import summarize_sample_set
from fsbench.benchmark.storage import ResultStore
from fsbench.benchmark.workloads import WorkloadExecutor
from fsbench.config.defaults import UNKNOWN_PLACEHOLDER
from fsbench.config.settings import Settings
from fsbench.logging_config import ConsoleCapture, get_logger
from fsbench.models.config import RunConfig
from fsbench.models.enums import Metric, RunState, WorkloadKind
from fsbench.models.environment import EnvironmentSnapshot
from fsbench.models.results import BenchmarkRecord, SampleSet, Statistics

__all__ = ["BenchmarkRunner", "SignalGuard", "termination_signals"]

logger = get_logger(__name__)

ExecutorFactory = Callable[[RunConfig, Path, Path], WorkloadExecutor]
MonitorFactory = Callable[[Path, str], list[BackgroundMonitor]]

CONSOLE_LOG = "benchmark_full.log"
REPORT_FILE = "report.txt"


class SignalGuard:
    """Turns termination signals into exceptions, with deferral windows.

    SIGTERM and SIGHUP raise BenchmarkInterrupted; SIGINT raises
    KeyboardInterrupt. Only the first signal raises. A signal arriving
    inside ``deferred()`` is held until the window closes, so steps that
    change or restore host state are never cut short.
    """

    def __init__(self) -> None:
        """Initialize the guard with no signal received."""
        self._depth = 0
        self._pending: int | None = None
        self._raised = False

    @property
    def pending(self) -> int | None:
        """Signal number held back by a deferral window, if any."""
        return self._pending

    def handle(self, signum: int, frame: FrameType | None) -> None:
        """Signal handler installed by termination_signals()."""
        name = signal.Signals(signum).name
        if self._raised or self._pending is not None:
            logger.warning("signal_ignored_during_cleanup", signal=name)
            return
        if self._depth:
            logger.warning("signal_deferred", signal=name)
            self._pending = signum
            return
        self._raise(signum)

    @contextmanager
    def deferred(self) -> Iterator[None]:
        """Hold signals for the enclosed block, then raise any held one."""
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
        if self._depth == 0 and self._pending is not None and not self._raised:
            signum, self._pending = self._pending, None
            self._raise(signum)

    def _raise(self, signum: int) -> None:
        self._raised = True
        name = signal.Signals(signum).name
        logger.warning("benchmark_interrupted", signal=name)
        if signum == signal.SIGINT:
            raise KeyboardInterrupt
        raise BenchmarkInterrupted(f"Received {name}")


@contextmanager
def termination_signals(install: bool = True) -> Iterator[SignalGuard]:
    """Route termination signals to a SignalGuard for the enclosed block.

    Previous handlers are restored on exit. Outside the main thread, or
    with ``install`` false, no handlers are installed and the guard's
    deferral windows are no-ops.

    Args:
        install: Whether to install the signal handlers.

    Yields:
        The guard receiving the signals.

    """
    guard = SignalGuard()
    if not install or threading.current_thread() is not threading.main_thread():
        yield guard
        return

    signals = [signal.SIGINT, signal.SIGTERM]
    if hasattr(signal, "SIGHUP"):
        signals.append(signal.SIGHUP)

    previous = {sig: signal.signal(sig, guard.handle) for sig in signals}
    try:
        yield guard
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


@dataclass
class _ExecutionResources:
    """Everything acquired during setup that teardown must release."""

    record_dir: Path | None = None
    capture: ConsoleCapture | None = None
    snapshot: EnvironmentSnapshot | None = None
    monitors: list[BackgroundMonitor] = field(default_factory=list)
    test_dir: Path | None = None
    device: str = UNKNOWN_PLACEHOLDER
    torn_down: bool = False


class BenchmarkRunner(StateMachineMixin[RunState]):
    """Executes the benchmark workload sequence and records the results.

    A runner performs a single execution; create a new runner per
    benchmark.

    Attributes:
        settings: Application settings.
        store: Record store receiving the result.

    """

    _VALID_TRANSITIONS: dict[RunState, set[RunState]] = {
        RunState.idle: {RunState.preflight, RunState.failed},
        RunState.preflight: {RunState.environment_setup, RunState.failed},
        RunState.environment_setup: {
            RunState.running,
            RunState.teardown,
            RunState.failed,
        },
        RunState.running: {RunState.teardown, RunState.failed},
        RunState.teardown: {RunState.summarized, RunState.failed},
        RunState.summarized: {RunState.persisted, RunState.failed},
        RunState.persisted: set(),
        RunState.failed: set(),
    }
    _TERMINAL_STATES = {RunState.persisted, RunState.failed}

    def __init__(
        self,
        settings: Settings,
        store: ResultStore | None = None,
        environment: EnvironmentController | None = None,
        preflight: PreflightChecker | None = None,
        inspector: SystemInspector | None = None,
        collector: SampleCollector | None = None,
        executor_factory: ExecutorFactory | None = None,
        monitor_factory: MonitorFactory | None = None,
        clock: Callable[[], datetime] = datetime.now,
        handle_signals: bool = True,
    ) -> None:
        """Initialize the benchmark runner.

        Args:
            settings: Application settings.
            store: Record store (default: the configured results directory).
            environment: Host environment controller.
            preflight: Preflight checker.
            inspector: System inspector for diagnostics.
            collector: Sample extractor.
            executor_factory: Builds the workload executor for a run.
            monitor_factory: Builds the background monitors for a run.
            clock: Source of the benchmark start time.
            handle_signals: Convert termination signals into exceptions.

        """
        self.settings = settings
        self.store = store or ResultStore(settings.resolved_results_dir)
        self._environment = environment or EnvironmentController(
            settle_seconds=settings.environment.settle_seconds
        )
        self._preflight = preflight or PreflightChecker(
            min_free_bytes=settings.environment.min_free_gib * 1024**3
        )
        self._inspector = inspector or SystemInspector()
        self._collector = collector or SampleCollector()
        self._executor_factory = executor_factory or self._default_executor
        self._monitor_factory = monitor_factory or self._default_monitors
        self._clock = clock
        self._handle_signals = handle_signals
        self._state = RunState.idle

    @property
    def state(self) -> RunState:
        """Current lifecycle state."""
        return self._state

    def _get_current_state(self) -> RunState:
        return self._state

    def _set_current_state(self, state: RunState) -> None:
        logger.debug("run_state_changed", old=self._state.value, new=state.value)
        self._state = state

    def execute(self, config: RunConfig) -> BenchmarkRecord:
        """Run the benchmark and persist its record.

        Args:
            config: Run configuration.

        Returns:
            The saved record.

        Raises:
            PreflightError: If the host cannot run the benchmark. Nothing
                has been changed on the host in that case.
            BenchmarkInterrupted: If a termination signal arrived.
            KeyboardInterrupt: If the user interrupted the benchmark.
            StorageError: If the record could not be saved.
            BenchmarkError: If the runner was already used.

        """
        if self._state is not RunState.idle:
            raise BenchmarkError("A runner can only execute one benchmark")

        logger.info(
            "benchmark_starting",
            benchmark=config.name,
            mount_point=str(config.mount_point),
            runs=config.num_runs,
        )

        self.transition_to(RunState.preflight)
        try:
            self._preflight.check(config.mount_point)
        except PreflightError:
            self._fail()
            raise

        timestamp = ResultStore.format_timestamp(self._clock())
        samples = {metric: SampleSet(metric) for metric in Metric}
        resources = _ExecutionResources()

        try:
            with termination_signals(install=self._handle_signals) as guard:
                try:
                    self.transition_to(RunState.environment_setup)
                    self._setup(config, timestamp, resources, guard)
                    self.transition_to(RunState.running)
                    self._run_all(config, resources, samples)
                finally:
                    with guard.deferred():
                        self._teardown(resources)

                record = self._summarize(config, timestamp, resources, samples)
                self.store.save(record)
                self.transition_to(RunState.persisted)
        except BaseException as e:
            logger.error("benchmark_failed", benchmark=config.name, error=repr(e))
            self._fail()
            raise

        logger.info(
            "benchmark_complete",
            benchmark=config.name,
            record_id=record.record_id,
            degraded=record.degraded,
        )
        return record

    def _fail(self) -> None:
        if not self.is_terminal():
            self.transition_to(RunState.failed)

    def _setup(
        self,
        config: RunConfig,
        timestamp: str,
        resources: _ExecutionResources,
        guard: SignalGuard,
    ) -> None:
        record_dir = self.store.create_record_dir(config.name, timestamp)
        resources.record_dir = record_dir

        resources.capture = ConsoleCapture(record_dir / CONSOLE_LOG)
        resources.capture.start()

        print(f"Benchmark: {config.name}")
        print(f"Target:    {config.mount_point}")
        print(
            f"Runs: {config.num_runs}  Files: {config.num_files}  "
            f"Jobs: {config.num_jobs}  Block size: {config.block_size}"
        )
        print(f"Results:   {record_dir}")

        resources.device = self._inspector.detect_device(config.mount_point)
        self._inspector.capture_system_state(
            record_dir / "system_info_before.log", "System state before benchmark"
        )
        if resources.device != UNKNOWN_PLACEHOLDER:
            self._inspector.capture_device_info(
                resources.device, record_dir / "device_info.log"
            )

        with guard.deferred():
            resources.snapshot = self._environment.prepare()
        priority = self._environment.raise_priority()
        print(f"Governor: {self._environment.current_governor()}  Priority: {priority.value}")

        resources.monitors = self._monitor_factory(record_dir, resources.device)
        for monitor in resources.monitors:
            monitor.start()

        config.test_dir.mkdir(parents=True, exist_ok=True)
        resources.test_dir = config.test_dir

    def _run_all(
        self,
        config: RunConfig,
        resources: _ExecutionResources,
        samples: dict[Metric, SampleSet],
    ) -> None:
        assert resources.record_dir is not None and resources.test_dir is not None
        executor = self._executor_factory(config, resources.test_dir, resources.record_dir)

        for run_index in range(1, config.num_runs + 1):
            print(f"\n=== Run {run_index}/{config.num_runs} ===")
            for kind in WorkloadKind:
                self._run_trial(executor, kind, run_index, samples)

            self._inspector.capture_kernel_log(
                resources.record_dir / f"dmesg_after_run_{run_index}.log",
                self.settings.environment.kernel_log_lines,
            )
            logger.info("benchmark_run_complete", run=run_index, runs=config.num_runs)

    def _run_trial(
        self,
        executor: WorkloadExecutor,
        kind: WorkloadKind,
        run_index: int,
        samples: dict[Metric, SampleSet],
    ) -> None:
        print(f"{kind.label}...")
        executor.prepare(kind)
        if kind.cache_sensitive:
            self._environment.evict_caches()

        try:
            output = executor.run(kind, run_index)
        except TrialTimeout as e:
            logger.warning("trial_timed_out", workload=kind.value, run=run_index, error=str(e))
            print(f"  timed out, no sample recorded for run {run_index}")
            for metric in kind.metrics:
                samples[metric].mark_missing()
            return
        except TrialError as e:
            logger.warning("trial_failed", workload=kind.value, run=run_index, error=str(e))
            for metric in kind.metrics:
                samples[metric].append(0.0)
            return

        for metric in kind.metrics:
            try:
                value = self._collector.collect(metric, output)
            except ToolOutputError as e:
                logger.warning(
                    "metric_not_found", metric=metric.value, run=run_index, error=str(e)
                )
                value = 0.0
            samples[metric].append(value)
            print(f"  {metric.label}: {format_value(value, metric.unit)}")

    def _teardown(self, resources: _ExecutionResources) -> None:
        if resources.torn_down:
            return
        resources.torn_down = True
        if self.can_transition_to(RunState.teardown):
            self.transition_to(RunState.teardown)

        for monitor in resources.monitors:
            self._best_effort(f"stop {monitor.tool}", monitor.stop)
        if resources.capture is not None:
            self._best_effort("restore console", resources.capture.stop)
        if resources.snapshot is not None:
            snapshot = resources.snapshot
            self._best_effort("restore environment", lambda: self._environment.restore(snapshot))
        self._best_effort("check throttling", self._report_throttling)
        if resources.record_dir is not None:
            record_dir = resources.record_dir
            self._best_effort(
                "final snapshot",
                lambda: self._inspector.capture_system_state(
                    record_dir / "system_info_after.log", "System state after benchmark"
                ),
            )
        if resources.test_dir is not None:
            test_dir = resources.test_dir
            self._best_effort("remove test directory", lambda: self._remove_test_dir(test_dir))

        logger.info("teardown_complete")

    @staticmethod
    def _best_effort(step: str, action: Callable[[], object]) -> None:
        try:
            action()
        except Exception as e:
            logger.error("teardown_step_failed", step=step, error=str(e))

    def _report_throttling(self) -> None:
        count = self._environment.throttle_count()
        if count:
            logger.warning("thermal_throttling_detected", events=count)

    @staticmethod
    def _remove_test_dir(test_dir: Path) -> None:
        if test_dir.exists():
            shutil.rmtree(test_dir)
        os.sync()

    def _summarize(
        self,
        config: RunConfig,
        timestamp: str,
        resources: _ExecutionResources,
        samples: dict[Metric, SampleSet],
    ) -> BenchmarkRecord:
        self.transition_to(RunState.summarized)

        statistics: dict[Metric, Statistics] = {
            metric: summarize_sample_set(sample_set) for metric, sample_set in samples.items()
        }
        missing = {metric: sample_set.missing for metric, sample_set in samples.items()}

        report = format_run_report(statistics, missing, title=f"Benchmark Summary: {config.name}")
        print(report)
        if resources.record_dir is not None:
            try:
                (resources.record_dir / REPORT_FILE).write_text(report + "\n", encoding="utf-8")
            except OSError as e:
                logger.warning("report_write_failed", error=str(e))

        record = BenchmarkRecord.from_statistics(
            config=config,
            timestamp=timestamp,
            kernel_version=kernel_version(),
            device=resources.device,
            statistics=statistics,
            missing_samples=missing,
        )
        if resources.record_dir is not None:
            record.record_id = resources.record_dir.name
        return record

    def _default_executor(
        self, config: RunConfig, test_dir: Path, artifacts_dir: Path
    ) -> WorkloadExecutor:
        return WorkloadExecutor(config, self.settings.workload, test_dir, artifacts_dir)

    def _default_monitors(self, record_dir: Path, device: str) -> list[BackgroundMonitor]:
        interval = self.settings.environment.monitor_interval_seconds
        monitors: list[BackgroundMonitor] = []
        if device != UNKNOWN_PLACEHOLDER:
            monitors.append(DiskActivityMonitor(record_dir / "iostat.log", device, interval))
        monitors.append(TemperatureMonitor(record_dir / "temperatures.log", interval))
        return monitors
