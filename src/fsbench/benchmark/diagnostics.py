"""Read-only system inspection for benchmark diagnostics.

Every helper here calls external inspection tools and writes plain
text. A tool that is missing or fails leaves an ``(unavailable)``
section behind; nothing in this module raises on tool failure.
"""

from __future__ import annotations

import platform
import subprocess
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from fsbench.config.defaults import DEFAULT_KERNEL_LOG_LINES, UNKNOWN_PLACEHOLDER
from fsbench.logging_config import get_logger

__all__ = [
    "SystemInspector",
    "kernel_version",
]

logger = get_logger(__name__)

_COMMAND_TIMEOUT_SECONDS = 30
_UNAVAILABLE = "(unavailable)"

_SYSTEM_SECTIONS: tuple[tuple[str, Sequence[str]], ...] = (
    ("Kernel", ("uname", "-a")),
    ("Uptime", ("uptime",)),
    ("CPU", ("lscpu",)),
    ("Memory", ("free", "-h")),
    ("Top processes", ("ps", "aux", "--sort=-%cpu")),
)


def kernel_version() -> str:
    """Return the running kernel release, e.g. ``6.8.0-45-generic``."""
    return platform.release() or UNKNOWN_PLACEHOLDER


class SystemInspector:
    """Captures system and device state into diagnostic log files.

    Attributes:
        timeout: Time limit for each inspection command.

    """

    def __init__(self, timeout: float = _COMMAND_TIMEOUT_SECONDS) -> None:
        """Initialize the inspector.

        Args:
            timeout: Time limit in seconds for each inspection command.

        """
        self.timeout = timeout

    def run(self, command: Sequence[str]) -> str | None:
        """Run an inspection command.

        Args:
            command: Command line to run.

        Returns:
            Standard output, or None if the tool is missing, failed or
            timed out.

        """
        try:
            result = subprocess.run(
                list(command),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("inspection_failed", command=command[0], error=str(e))
            return None

        if result.returncode != 0:
            logger.debug(
                "inspection_failed",
                command=command[0],
                returncode=result.returncode,
            )
            return None
        return result.stdout

    def detect_device(self, mount_point: Path) -> str:
        """Return the block device backing ``mount_point``.

        Args:
            mount_point: A path on the filesystem under test.

        Returns:
            Device path such as ``/dev/sdb1``, or ``"unknown"``.

        """
        output = self.run(["df", "--output=source", str(mount_point)])
        if output:
            lines = [line.strip() for line in output.splitlines() if line.strip()]
            if len(lines) >= 2:
                return lines[-1]
        return UNKNOWN_PLACEHOLDER

    def capture_system_state(self, path: Path, title: str = "System state") -> None:
        """Write kernel, uptime, CPU, memory and process information.

        Args:
            path: Destination file.
            title: Heading for the report.

        """
        sections = [(name, self.run(command)) for name, command in _SYSTEM_SECTIONS]
        self._write_report(path, title, sections)

    def capture_device_info(self, device: str, path: Path) -> None:
        """Write block-device layout, drive identification and SMART data.

        Args:
            device: Device under test.
            path: Destination file.

        """
        sections = [
            ("Block devices", self.run(["lsblk", "-o", "NAME,SIZE,TYPE,FSTYPE,MOUNTPOINT,MODEL"])),
            ("Drive identification", self.run(["hdparm", "-I", device])),
            ("SMART data", self.run(["smartctl", "-a", device])),
        ]
        self._write_report(path, f"Device information: {device}", sections)

    def capture_kernel_log(
        self,
        path: Path,
        lines: int = DEFAULT_KERNEL_LOG_LINES,
    ) -> None:
        """Write the most recent kernel log lines.

        Args:
            path: Destination file.
            lines: Number of trailing lines to keep.

        """
        output = self.run(["dmesg", "-T"])
        tail = None
        if output is not None:
            tail = "\n".join(output.splitlines()[-lines:]) if lines else ""
        self._write_report(path, "Kernel log", [("Recent messages", tail)])

    def _write_report(
        self,
        path: Path,
        title: str,
        sections: Sequence[tuple[str, str | None]],
    ) -> None:
        lines = [f"=== {title} ({datetime.now().isoformat(timespec='seconds')}) ==="]
        for name, content in sections:
            lines.append("")
            lines.append(f"--- {name} ---")
            lines.append(content.rstrip() if content is not None else _UNAVAILABLE)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as e:
            logger.warning("diagnostics_write_failed", path=str(path), error=str(e))
