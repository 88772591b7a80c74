"""Shared utilities for the benchmark system.

This module contains common utility functions used across the benchmark system.
"""

from __future__ import annotations

__all__ = ["format_bytes", "sanitize_path_component"]


def sanitize_path_component(name: str) -> str:
    """Sanitize a string for safe use in filesystem paths.

    Prevents path traversal by replacing dangerous characters.

    Args:
        name: The string to sanitize.

    Returns:
        A filesystem-safe version of the string.

    """
    if not name:
        return "unnamed"

    safe = name.replace("/", "-").replace("\\", "-").replace("..", "_")
    safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in safe)
    safe = safe.lstrip(".-")

    return safe or "unnamed"


def format_bytes(value: int) -> str:
    """Format a byte count with a binary unit suffix (``5.0 GiB``)."""
    amount = float(value)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if abs(amount) < 1024:
            return f"{amount:.1f} {unit}"
        amount /= 1024
    return f"{amount:.1f} TiB"
