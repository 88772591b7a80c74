"""Command-line interface for fsbench.

This module provides the argument parser, command handlers, the
interactive menu and the main entry point.
"""

from fsbench.cli.main import CommandDispatcher, main
from fsbench.cli.parser import create_parser

__all__ = ["CommandDispatcher", "create_parser", "main"]
