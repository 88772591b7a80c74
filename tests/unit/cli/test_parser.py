"""Unit tests for the CLI parser and argument validation."""

import pytest

from fsbench.cli.parser import create_parser
from fsbench.cli.validators import parse_assignment, validate_args


class TestCreateParser:
    """Tests for create_parser function."""

    def test_parser_prog(self) -> None:
        """Test that create_parser names the program."""
        assert create_parser().prog == "fsbench"

    def test_parser_has_version_flag(self) -> None:
        """Test that parser has --version flag."""
        parser = create_parser()
        version_actions = [
            a for a in parser._actions if "--version" in getattr(a, "option_strings", [])
        ]
        assert len(version_actions) == 1

    def test_run_options(self) -> None:
        """Test that run accepts every run parameter."""
        args = create_parser().parse_args(
            [
                "run",
                "--name",
                "tuned",
                "--mount",
                "/mnt/x",
                "--runs",
                "5",
                "--files",
                "2000",
                "--jobs",
                "4",
                "--block-size",
                "1M",
            ]
        )

        assert args.command == "run"
        assert args.name == "tuned"
        assert args.mount == "/mnt/x"
        assert (args.runs, args.files, args.jobs) == (5, 2000, 4)
        assert args.block_size == "1M"

    def test_run_requires_name(self) -> None:
        """Test that run without --name is rejected."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["run"])

    def test_global_options(self) -> None:
        """Test that global options precede the subcommand."""
        args = create_parser().parse_args(
            ["--verbose", "--results-dir", "/tmp/r", "--config", "/tmp/c.yaml", "list"]
        )

        assert args.verbose is True
        assert args.results_dir == "/tmp/r"
        assert args.config == "/tmp/c.yaml"

    def test_no_subcommand(self) -> None:
        """Test that the subcommand is optional."""
        assert create_parser().parse_args([]).command is None

    def test_settings_set_repeatable(self) -> None:
        """Test that --set can be given several times."""
        args = create_parser().parse_args(
            ["settings", "--set", "num_runs=5", "--set", "workload.io_depth=8", "--save"]
        )

        assert args.set == ["num_runs=5", "workload.io_depth=8"]
        assert args.save is True


class TestValidateArgs:
    """Tests for validate_args function."""

    def test_compare_needs_two_records(self) -> None:
        """Test that comparing a single record is rejected."""
        args = create_parser().parse_args(["compare", "1"])

        assert validate_args(args) is not None

    def test_compare_all(self) -> None:
        """Test that --all needs no explicit records."""
        args = create_parser().parse_args(["compare", "--all"])

        assert validate_args(args) is None

    def test_bad_assignment(self) -> None:
        """Test that --set without '=' is rejected."""
        args = create_parser().parse_args(["settings", "--set", "num_runs"])

        error = validate_args(args)

        assert error is not None
        assert "KEY=VALUE" in error

    def test_blank_name(self) -> None:
        """Test that a whitespace-only benchmark name is rejected."""
        args = create_parser().parse_args(["run", "--name", "  "])

        assert validate_args(args) is not None

    def test_parse_assignment(self) -> None:
        """Test that assignments split on the first '='."""
        assert parse_assignment(" mount_point = /mnt/a=b ") == ("mount_point", "/mnt/a=b")
