"""Structured logging configuration using structlog.

Provides centralized logging configuration with:
- Pretty console output for interactive runs
- JSON formatting for machine consumption
- A console capture that mirrors a benchmark's output into its log file
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

import structlog

__all__ = ["ConsoleCapture", "configure_logging", "get_logger"]


def configure_logging(verbose: bool = False, json_output: bool = False) -> None:
    """Configure structured logging for the application.

    Args:
        verbose: Enable verbose/debug output.
        json_output: If True, output JSON format. Otherwise, pretty console format.

    """
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ from the calling module.

    Returns:
        Configured structlog logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("trial_complete", workload="sequential_write", run=1)

    """
    return structlog.get_logger(name)


class _TeeStream:
    """Text stream that writes to the live console and a log file."""

    def __init__(self, primary: TextIO, mirror: TextIO) -> None:
        self._primary = primary
        self._mirror = mirror

    def write(self, text: str) -> int:
        self._mirror.write(text)
        return self._primary.write(text)

    def flush(self) -> None:
        self._primary.flush()
        self._mirror.flush()

    def isatty(self) -> bool:
        return self._primary.isatty()

    def __getattr__(self, name: str) -> object:
        return getattr(self._primary, name)


class ConsoleCapture:
    """Mirror everything shown on the console into a durable log file.

    While active, ``sys.stdout`` and ``sys.stderr`` are replaced by streams
    that write both to the original console and to the log file, and a
    file handler is attached to the root logger so structlog events land
    in the same file.

    Attributes:
        log_path: File receiving the mirrored output.

    """

    def __init__(self, log_path: Path) -> None:
        """Initialize the capture.

        Args:
            log_path: File receiving the mirrored output.

        """
        self.log_path = log_path
        self._file: TextIO | None = None
        self._handler: logging.Handler | None = None
        self._saved: tuple[TextIO, TextIO] | None = None

    @property
    def active(self) -> bool:
        """Whether console output is currently being mirrored."""
        return self._file is not None

    def start(self) -> None:
        """Begin mirroring console output. Calling twice is a no-op."""
        if self.active:
            return

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")
        self._saved = (sys.stdout, sys.stderr)
        sys.stdout = _TeeStream(sys.stdout, self._file)  # type: ignore[assignment]
        sys.stderr = _TeeStream(sys.stderr, self._file)  # type: ignore[assignment]

        self._handler = logging.StreamHandler(self._file)
        self._handler.setFormatter(logging.Formatter("%(message)s"))
        logging.getLogger().addHandler(self._handler)

    def stop(self) -> None:
        """Restore the original console streams and close the log file."""
        if not self.active:
            return

        if self._handler is not None:
            logging.getLogger().removeHandler(self._handler)
            self._handler = None
        if self._saved is not None:
            sys.stdout, sys.stderr = self._saved
            self._saved = None
        assert self._file is not None
        self._file.close()
        self._file = None

    def __enter__(self) -> ConsoleCapture:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
