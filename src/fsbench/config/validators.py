"""Value parsers and validators shared by settings and run models."""

from __future__ import annotations

import re

__all__ = ["parse_size"]

_SIZE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*([A-Z]*)$")
_SIZE_UNITS = {
    "B": 1,
    "K": 1024,
    "KB": 1024,
    "KIB": 1024,
    "M": 1024**2,
    "MB": 1024**2,
    "MIB": 1024**2,
    "G": 1024**3,
    "GB": 1024**3,
    "GIB": 1024**3,
}


def parse_size(size: str) -> int:
    """Parse a size string such as ``4k``, ``512M`` or ``1G`` into bytes.

    Units are binary (``k`` is 1024 bytes) and case-insensitive.

    Args:
        size: The size string.

    Returns:
        Size in bytes.

    Raises:
        ValueError: If the string is malformed, uses an unknown unit, or
            is not a positive size.

    """
    match = _SIZE_PATTERN.match(size.strip().upper())
    if not match:
        raise ValueError(f"Invalid size format: {size!r}")

    unit = match.group(2) or "B"
    if unit not in _SIZE_UNITS:
        raise ValueError(f"Unknown size unit in {size!r}: {unit}")

    value = int(float(match.group(1)) * _SIZE_UNITS[unit])
    if value <= 0:
        raise ValueError(f"Size must be positive: {size!r}")
    return value
