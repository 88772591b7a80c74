"""Base exceptions for fsbench.

This module defines the root exception hierarchy for the entire
fsbench package. All domain-specific exceptions should inherit
from FsBenchError.
"""

__all__ = ["FsBenchError"]


class FsBenchError(Exception):
    """Base exception for all fsbench errors.

    Provides a common exception type for clients to catch package errors.
    """

    pass
