"""Exceptions for the CLI module.

This module defines exceptions specific to CLI operations.
"""

from fsbench.exceptions import FsBenchError

__all__ = [
    "CLIError",
    "ValidationError",
]


class CLIError(FsBenchError):
    """Base exception for CLI-related errors."""

    pass


class ValidationError(CLIError):
    """Raised when CLI argument validation fails."""

    pass
