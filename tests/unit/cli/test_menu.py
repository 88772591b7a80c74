"""Unit tests for the interactive menu."""

from argparse import Namespace
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fsbench.benchmark.storage import ResultStore
from fsbench.cli.commands.base import CommandResult
from fsbench.cli.main import CommandDispatcher
from fsbench.cli.menu import InteractiveMenu


def _scripted(answers: list[str]) -> Callable[[str], str]:
    remaining = list(answers)

    def _input(prompt: str) -> str:
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return _input


@pytest.fixture
def base_args(tmp_path: Path) -> Namespace:
    """Global options pointing at temporary settings and results."""
    return Namespace(
        command="menu",
        config=str(tmp_path / "fsbench.yaml"),
        results_dir=str(tmp_path / "results"),
        verbose=False,
    )


def _menu(
    base_args: Namespace,
    answers: list[str],
    confirm: str = "yes",
) -> tuple[InteractiveMenu, list[str]]:
    output: list[str] = []
    dispatcher = CommandDispatcher(prompt=lambda _: confirm)
    menu = InteractiveMenu(dispatcher, base_args, input_fn=_scripted(answers), output=output.append)
    return menu, output


class TestInteractiveMenu:
    """Tests for InteractiveMenu."""

    def test_render_lists_options(self, base_args: Namespace) -> None:
        """Test that all nine options are shown."""
        menu, _ = _menu(base_args, [])

        text = menu.render()

        assert "1. Run New Benchmark" in text
        assert "9. Exit" in text

    def test_exit(self, base_args: Namespace) -> None:
        """Test that option 9 leaves the menu."""
        menu, _ = _menu(base_args, ["9"])

        assert menu.loop() == 0

    def test_end_of_input_exits(self, base_args: Namespace) -> None:
        """Test that closed input leaves the menu."""
        menu, _ = _menu(base_args, [])

        assert menu.loop() == 0

    def test_invalid_option(self, base_args: Namespace) -> None:
        """Test that unknown choices are reported and the menu repeats."""
        menu, output = _menu(base_args, ["42", "9"])

        menu.loop()

        assert "Invalid option: '42'" in output

    def test_list(self, base_args: Namespace, make_record) -> None:
        """Test that option 3 lists stored records."""
        ResultStore(Path(base_args.results_dir)).save(make_record(name="stock"))
        menu, output = _menu(base_args, ["3", "9"])

        menu.loop()

        assert any("stock" in block for block in output)

    def test_delete_with_confirmation(self, base_args: Namespace, make_record) -> None:
        """Test that option 4 deletes the chosen record after typed confirmation."""
        store = ResultStore(Path(base_args.results_dir))
        store.save(make_record(name="stock"))
        menu, output = _menu(base_args, ["4", "1", "9"], confirm="yes")

        menu.loop()

        assert store.list() == []
        assert any(block.startswith("Deleted") for block in output)

    def test_run_collects_parameters(self, base_args: Namespace) -> None:
        """Test that option 1 prompts for parameters, blank meaning default."""
        menu, _ = _menu(base_args, ["1", "tuned", "", "5", "", "", "1M", "9"])
        run = MagicMock()
        run.name = "run"
        run.execute.return_value = CommandResult(exit_code=0, message="done")
        menu.dispatcher.commands["run"] = run

        menu.loop()

        args = run.execute.call_args.args[0]
        assert args.name == "tuned"
        assert args.mount is None
        assert args.runs == 5
        assert args.files is None
        assert args.block_size == "1M"
        assert args.results_dir == base_args.results_dir

    def test_bad_number_is_reported(self, base_args: Namespace) -> None:
        """Test that a non-numeric answer is reported and the menu continues."""
        menu, output = _menu(base_args, ["1", "tuned", "", "many", "9"])

        assert menu.loop() == 0
        assert any("not a whole number" in block for block in output)

    def test_run_requires_name(self, base_args: Namespace) -> None:
        """Test that a blank benchmark name returns to the menu."""
        menu, output = _menu(base_args, ["1", "", "9"])

        menu.loop()

        assert "A benchmark name is required" in output

    def test_settings_changes_are_saved(self, tmp_path: Path, base_args: Namespace) -> None:
        """Test that option 7 applies and saves assignments."""
        menu, _ = _menu(base_args, ["7", "num_runs=4", "", "9"])

        menu.loop()

        assert "num_runs: 4" in (tmp_path / "fsbench.yaml").read_text()
