"""Tests for the prompt layer."""

import io

import pytest
from rich.console import Console

from memscape_setup.prompts import Prompter, ScriptedLineSource, SelectOption

OPTIONS = [
    SelectOption(label="No, register a new agent", value="register"),
    SelectOption(label="Yes, I have one", value="existing"),
]


def make_prompter(*lines: str) -> tuple[Prompter, io.StringIO]:
    """Build a prompter answering from lines and recording its output."""
    output = io.StringIO()
    console = Console(file=output, width=120)
    return Prompter(console, ScriptedLineSource(lines, console)), output


class TestPrompter:
    """Test answer handling for prompts."""

    def test_prompt_strips(self) -> None:
        """Test that answers are stripped of surrounding whitespace."""
        ui, _ = make_prompter("  scout  ")

        assert ui.prompt("Agent name:") == "scout"

    def test_prompt_end_of_input(self) -> None:
        """Test that exhausted input yields an empty answer."""
        ui, _ = make_prompter()

        assert ui.prompt("Agent name:") == ""

    def test_prompt_echoes_answer(self) -> None:
        """Test that scripted answers appear in the transcript."""
        ui, output = make_prompter("scout")

        ui.prompt("Agent name:")

        assert "? Agent name: scout" in output.getvalue()

    @pytest.mark.parametrize(
        ("answer", "expected"),
        [("", True), ("y", True), ("Yes", True), ("n", False), ("nope", False), ("x", False)],
    )
    def test_confirm_default_yes(self, answer: str, expected: bool) -> None:
        """Test confirm answers with the default set to yes."""
        ui, _ = make_prompter(answer)

        assert ui.confirm("Continue?") is expected

    def test_confirm_default_no(self) -> None:
        """Test that an empty answer takes a no default."""
        ui, output = make_prompter("")

        assert ui.confirm("Continue?", default_yes=False) is False
        assert "(y/N)" in output.getvalue()

    def test_confirm_end_of_input(self) -> None:
        """Test that exhausted input accepts the default."""
        ui, _ = make_prompter()

        assert ui.confirm("Continue?") is True

    @pytest.mark.parametrize(
        ("answer", "expected"),
        [("1", "register"), ("2", "existing"), (" 2 ", "existing")],
    )
    def test_select_valid(self, answer: str, expected: str) -> None:
        """Test numbered selection."""
        ui, _ = make_prompter(answer)

        assert ui.select("Do you have a key?", OPTIONS) == expected

    @pytest.mark.parametrize("answer", ["0", "3", "-1", "two", ""])
    def test_select_out_of_range_defaults_to_first(self, answer: str) -> None:
        """Test that anything but a valid number picks the first option."""
        ui, _ = make_prompter(answer)

        assert ui.select("Do you have a key?", OPTIONS) == "register"

    def test_select_lists_options(self) -> None:
        """Test that options are printed with their numbers."""
        ui, output = make_prompter("1")

        ui.select("Do you have a key?", OPTIONS)

        text = output.getvalue()
        assert "1. No, register a new agent" in text
        assert "2. Yes, I have one" in text
        assert "(1-2)" in text

    def test_error_escapes_markup(self) -> None:
        """Test that error text with brackets is printed literally."""
        ui, output = make_prompter()

        ui.error("bad value [red]x[/red]")

        assert "bad value [red]x[/red]" in output.getvalue()
