"""CLI argument parser configuration.

This module provides the argument parser for the fsbench CLI.
"""

import argparse

from fsbench import __version__
from fsbench.config.defaults import DEFAULT_RESULTS_DIR, DEFAULT_SETTINGS_FILE

__all__ = ["create_parser"]


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        An ArgumentParser configured with all CLI options and subcommands.

    """
    parser = argparse.ArgumentParser(
        prog="fsbench",
        description=(
            "fsbench - Repeatable filesystem micro-benchmarks with stored, "
            "comparable results."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Benchmark the filesystem mounted at /mnt/ext4_test (needs root)
  sudo fsbench run --name baseline --mount /mnt/ext4_test

  # Five runs with a larger block size
  sudo fsbench run --name tuned --runs 5 --block-size 1M

  # List stored records, then compare two of them by list number
  fsbench list
  fsbench compare 1 2

  # Export every record to CSV
  fsbench export --output results.csv

  # Change the default mount point
  fsbench settings --set mount_point=/mnt/data --save

  # Start the interactive menu
  fsbench menu
        """,
    )

    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output with debug logging",
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="FILE",
        help=f"Settings file to use (default: {DEFAULT_SETTINGS_FILE})",
    )

    parser.add_argument(
        "--results-dir",
        type=str,
        metavar="DIR",
        dest="results_dir",
        help=f"Directory for benchmark records (default: {DEFAULT_RESULTS_DIR})",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # Run a benchmark
    run = subparsers.add_parser("run", help="Run a new benchmark")
    run.add_argument(
        "--name",
        "-n",
        type=str,
        required=True,
        help="Benchmark name, e.g. the kernel or mount options under test",
    )
    run.add_argument(
        "--mount",
        "-m",
        type=str,
        metavar="DIR",
        help="Mount point of the filesystem under test",
    )
    run.add_argument(
        "--runs",
        type=int,
        metavar="N",
        help="Number of repetitions of every workload (1-10)",
    )
    run.add_argument(
        "--files",
        type=int,
        metavar="N",
        help="Files and directories per metadata workload (100-10000)",
    )
    run.add_argument(
        "--jobs",
        type=int,
        metavar="N",
        help="Parallel jobs for the random I/O workloads (1-64)",
    )
    run.add_argument(
        "--block-size",
        type=str,
        metavar="SIZE",
        dest="block_size",
        help="Block size for block I/O workloads, e.g. 4k or 1M",
    )

    # Stored records
    subparsers.add_parser("list", help="List stored benchmark records")

    show = subparsers.add_parser("show", help="Show a stored record in detail")
    show.add_argument("record", help="Record id or list number")

    compare = subparsers.add_parser("compare", help="Compare stored records")
    compare.add_argument(
        "records",
        nargs="*",
        help="Record ids or list numbers (at least two)",
    )
    compare.add_argument(
        "--all",
        action="store_true",
        help="Compare every stored record",
    )

    delete = subparsers.add_parser("delete", help="Delete a stored record")
    delete.add_argument("record", help="Record id or list number")
    delete.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Delete without asking for confirmation",
    )

    export = subparsers.add_parser("export", help="Export records to CSV")
    export.add_argument(
        "records",
        nargs="*",
        help="Record ids or list numbers (default: all records)",
    )
    export.add_argument(
        "--output",
        "-o",
        type=str,
        metavar="FILE",
        help="Destination CSV file (default: <results-dir>/benchmark_export.csv)",
    )

    # Settings and guidance
    settings = subparsers.add_parser("settings", help="Show or change default settings")
    settings.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="Change a setting, e.g. num_runs=5 or workload.io_depth=64 (repeatable)",
    )
    settings.add_argument(
        "--save",
        action="store_true",
        help="Write the resulting settings to the settings file",
    )

    subparsers.add_parser("tips", help="Show advice for stable measurements")
    subparsers.add_parser("menu", help="Start the interactive menu")

    return parser
