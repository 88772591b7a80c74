"""Run benchmark command.

This module implements the command that executes a new benchmark
and persists its record.
"""

from argparse import Namespace
from pathlib import Path

from pydantic import ValidationError

from fsbench.benchmark.exceptions import PreflightError
from fsbench.benchmark.runner import BenchmarkRunner
from fsbench.benchmark.storage import ResultStore
from fsbench.cli.commands.base import BaseCommand, CommandResult, resolve_settings
from fsbench.logging_config import get_logger
from fsbench.models.config import RunConfig

__all__ = ["RunBenchmarkCommand"]

logger = get_logger(__name__)

PREFLIGHT_EXIT_CODE = 2


class RunBenchmarkCommand(BaseCommand):
    """Command to run a benchmark against a mounted filesystem."""

    def __init__(self, runner_class: type[BenchmarkRunner] = BenchmarkRunner) -> None:
        """Initialize the command.

        Args:
            runner_class: Runner implementation, replaceable in tests.

        """
        self._runner_class = runner_class

    @property
    def name(self) -> str:
        """Get the command name."""
        return "run"

    def execute(self, args: Namespace) -> CommandResult:
        """Execute the benchmark.

        Args:
            args: Parsed command-line arguments.

        Returns:
            CommandResult pointing at the saved record.

        """
        settings = resolve_settings(args)
        mount = getattr(args, "mount", None)

        try:
            config = RunConfig.from_settings(
                settings,
                name=args.name,
                mount_point=Path(mount).expanduser() if mount else None,
                num_runs=getattr(args, "runs", None),
                num_files=getattr(args, "files", None),
                num_jobs=getattr(args, "jobs", None),
                block_size=getattr(args, "block_size", None),
            )
        except ValidationError as e:
            return CommandResult(exit_code=1, message=_format_validation_error(e))

        store = ResultStore(settings.resolved_results_dir)
        runner = self._runner_class(settings, store=store)

        logger.info("benchmark_requested", name=config.name, mount=str(config.mount_point))
        try:
            record = runner.execute(config)
        except PreflightError as e:
            lines = ["Preflight checks failed:"]
            lines.extend(f"  - {issue}" for issue in e.issues)
            return CommandResult(exit_code=PREFLIGHT_EXIT_CODE, message="\n".join(lines))

        location = store.root / (record.record_id or "")
        message = f"Benchmark '{record.benchmark_name}' saved to {location}"
        if record.degraded:
            message += "\nWarning: some trials timed out; results are incomplete"
        return CommandResult(exit_code=0, message=message)


def _format_validation_error(error: ValidationError) -> str:
    lines = ["Invalid benchmark parameters:"]
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        lines.append(f"  - {location}: {detail['msg']}")
    return "\n".join(lines)
