"""Output formatting utilities for CLI.

This module provides functions for formatting settings and the
measurement advice screen.
"""

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from fsbench.config.settings import Settings

__all__ = [
    "PERFORMANCE_TIPS",
    "flatten_settings",
    "format_settings",
    "format_tips",
]

PERFORMANCE_TIPS = (
    "Close other applications and stop background services (indexers, backups,",
    "package updates) before benchmarking.",
    "Keep laptops on AC power and avoid runs right after heavy load so the",
    "system starts from a normal thermal state.",
    "Use a dedicated, otherwise idle filesystem for the mount point.",
    "Repeat measurements (3 or more runs) and check the variance warnings.",
    "",
    "During a run fsbench itself switches the CPU governor to 'performance',",
    "disables turbo boost, raises its scheduling priority and drops the page",
    "cache before cache-sensitive workloads. Everything is restored afterwards.",
)


def flatten_settings(data: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(dotted_key, value)`` pairs of a nested settings mapping."""
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, Mapping):
            yield from flatten_settings(value, prefix=f"{dotted}.")
        else:
            yield dotted, value


def format_settings(settings: Settings, path: Path | None = None) -> str:
    """Format settings as aligned ``key = value`` lines.

    Args:
        settings: Settings to show.
        path: Settings file the values belong to, shown as a heading.

    Returns:
        Formatted string output.

    """
    items = list(flatten_settings(settings.model_dump(mode="json")))
    width = max(len(key) for key, _ in items)

    lines = ["Current settings"]
    if path is not None:
        lines[0] += f" ({path})"
    lines.append("-" * 60)
    lines.extend(f"{key.ljust(width)} = {value}" for key, value in items)
    return "\n".join(lines)


def format_tips(
    governor: str,
    load_average: tuple[float, float, float] | None,
    available_memory: str | None,
) -> str:
    """Format the measurement advice together with the current system state.

    Args:
        governor: Current CPU frequency governor.
        load_average: 1, 5 and 15 minute load averages, if known.
        available_memory: Human-readable available memory, if known.

    Returns:
        Formatted string output.

    """
    lines = ["", "=" * 60, "Tips for Stable Measurements", "=" * 60, ""]
    lines.extend(f"  {tip}" if tip else "" for tip in PERFORMANCE_TIPS)

    load = (
        " ".join(f"{value:.2f}" for value in load_average)
        if load_average is not None
        else "unknown"
    )
    lines.extend(
        [
            "",
            "Current system state",
            "-" * 60,
            f"  CPU governor:     {governor}",
            f"  Load average:     {load}",
            f"  Available memory: {available_memory or 'unknown'}",
        ]
    )
    return "\n".join(lines)
