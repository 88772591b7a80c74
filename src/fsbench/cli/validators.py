"""Validation utilities for CLI arguments.

This module checks argument combinations that argparse cannot express.
Range checks on run parameters are left to the run models.
"""

import argparse

__all__ = [
    "parse_assignment",
    "validate_args",
]


def parse_assignment(text: str) -> tuple[str, str]:
    """Split a ``KEY=VALUE`` settings assignment.

    Args:
        text: The assignment.

    Returns:
        Tuple of (key, value), both stripped.

    Raises:
        ValueError: If there is no ``=`` or the key is empty.

    """
    key, sep, value = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"Expected KEY=VALUE, got {text!r}")
    return key, value.strip()


def validate_args(args: argparse.Namespace) -> str | None:
    """Validate CLI arguments for consistency.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Error message if validation fails, None if valid.

    """
    command = getattr(args, "command", None)

    if command == "compare":
        records = getattr(args, "records", None) or []
        if not getattr(args, "all", False) and len(records) < 2:
            return "Error: compare needs at least two records (or --all)"

    if command == "settings":
        for assignment in getattr(args, "set", None) or []:
            try:
                parse_assignment(assignment)
            except ValueError as e:
                return f"Error: {e}"

    if command == "run":
        name = getattr(args, "name", None)
        if name is not None and not name.strip():
            return "Error: --name must not be empty"

    return None
