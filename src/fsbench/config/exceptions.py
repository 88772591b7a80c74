"""Exceptions for config module.

This module defines exceptions related to settings loading,
parsing, and validation errors.
"""

from fsbench.exceptions import FsBenchError

__all__ = ["ConfigurationError"]


class ConfigurationError(FsBenchError):
    """Base exception for configuration-related errors."""

    pass
