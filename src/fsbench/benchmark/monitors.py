"""Background observers that run alongside a benchmark.

Two side channels append to log files for the whole execution: a disk
activity sampler (``iostat`` child process) and a temperature sampler
(a thread calling ``sensors`` on a fixed interval). Both degrade to
doing nothing when their tool is missing, and both are stopped
unconditionally at teardown.
"""

from __future__ import annotations

import os
import shutil
import signal
import subprocess
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import TextIO

from fsbench.config.defaults import DEFAULT_MONITOR_INTERVAL_SECONDS
from fsbench.logging_config import get_logger

__all__ = [
    "BackgroundMonitor",
    "DiskActivityMonitor",
    "TemperatureMonitor",
]

logger = get_logger(__name__)

_TERMINATE_GRACE_SECONDS = 2.0
_SENSOR_LINES = 5


class BackgroundMonitor(ABC):
    """A best-effort observer writing to one log file.

    Attributes:
        log_path: File the observer appends to.
        interval: Sampling interval in seconds.

    """

    tool: str = ""

    def __init__(
        self,
        log_path: Path,
        interval: float = DEFAULT_MONITOR_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the monitor.

        Args:
            log_path: File the observer appends to.
            interval: Sampling interval in seconds.

        """
        self.log_path = log_path
        self.interval = interval

    @property
    @abstractmethod
    def running(self) -> bool:
        """Whether the observer is currently active."""
        pass

    def start(self) -> bool:
        """Start observing.

        Returns:
            True if the observer started, False if its tool is unavailable.

        """
        if self.running:
            return True
        if shutil.which(self.tool) is None:
            logger.warning("monitor_unavailable", tool=self.tool)
            return False
        try:
            self._start()
        except OSError as e:
            logger.warning("monitor_start_failed", tool=self.tool, error=str(e))
            return False
        logger.info("monitor_started", tool=self.tool, log=str(self.log_path))
        return True

    def stop(self) -> None:
        """Stop observing. Safe to call when not running."""
        if not self.running:
            return
        self._stop()
        logger.info("monitor_stopped", tool=self.tool)

    @abstractmethod
    def _start(self) -> None:
        pass

    @abstractmethod
    def _stop(self) -> None:
        pass


class DiskActivityMonitor(BackgroundMonitor):
    """Runs ``iostat -x <device> <interval>`` into a log file."""

    tool = "iostat"

    def __init__(
        self,
        log_path: Path,
        device: str,
        interval: float = DEFAULT_MONITOR_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the monitor.

        Args:
            log_path: File receiving iostat output.
            device: Block device to observe, e.g. ``/dev/sda1``.
            interval: Sampling interval in seconds.

        """
        super().__init__(log_path, interval)
        self.device = device
        self._process: subprocess.Popen[bytes] | None = None
        self._log: TextIO | None = None

    @property
    def running(self) -> bool:
        return self._process is not None

    def command(self) -> list[str]:
        """Return the iostat command line."""
        interval = max(1, int(round(self.interval)))
        return ["iostat", "-x", os.path.basename(self.device), str(interval)]

    def _start(self) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._log = self.log_path.open("a", encoding="utf-8")
        try:
            self._process = subprocess.Popen(
                self.command(),
                stdout=self._log,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError:
            self._log.close()
            self._log = None
            raise

    def _stop(self) -> None:
        assert self._process is not None
        process = self._process
        try:
            os.killpg(process.pid, signal.SIGTERM)
        except ProcessLookupError:
            pass
        except OSError:
            process.terminate()
        try:
            process.wait(timeout=_TERMINATE_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            try:
                os.killpg(process.pid, signal.SIGKILL)
            except OSError:
                process.kill()
            process.wait()
        finally:
            self._process = None
            if self._log is not None:
                self._log.close()
                self._log = None


class TemperatureMonitor(BackgroundMonitor):
    """Appends timestamped ``sensors`` readings to a log file."""

    tool = "sensors"

    def __init__(
        self,
        log_path: Path,
        interval: float = DEFAULT_MONITOR_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the monitor.

        Args:
            log_path: File receiving the readings.
            interval: Sampling interval in seconds.

        """
        super().__init__(log_path, interval)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None

    def sample(self) -> str:
        """Take one reading: a timestamp line plus the first sensor lines."""
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        try:
            result = subprocess.run(
                ["sensors"],
                capture_output=True,
                text=True,
                timeout=max(self.interval, 1.0),
                check=False,
            )
            lines = result.stdout.splitlines()[:_SENSOR_LINES]
        except (OSError, subprocess.SubprocessError) as e:
            lines = [f"(sensors failed: {e})"]
        return "\n".join([stamp, *lines]) + "\n"

    def _start(self) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop, name="fsbench-temperature", daemon=True
        )
        self._thread.start()

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            reading = self.sample()
            try:
                with self.log_path.open("a", encoding="utf-8") as f:
                    f.write(reading)
            except OSError as e:
                logger.warning("temperature_log_failed", error=str(e))
                return
            self._stop_event.wait(self.interval)

    def _stop(self) -> None:
        assert self._thread is not None
        self._stop_event.set()
        self._thread.join(timeout=self.interval + _TERMINATE_GRACE_SECONDS)
        self._thread = None
