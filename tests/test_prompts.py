"""Unit tests for the rich-based prompter (create_ps.prompts)."""

from __future__ import annotations

import io
from unittest.mock import patch

import pytest
from rich.console import Console

from create_ps.prompts import Prompter, UserCancelled, _parse_numbers

OPTIONS = [
    ("src", "Source", "Recommended"),
    ("test", "Test", ""),
    ("readme", "Readme", "Recommended"),
]


@pytest.fixture
def prompter() -> Prompter:
    return Prompter(console=Console(file=io.StringIO(), force_terminal=False))


def _output(prompter: Prompter) -> str:
    return prompter.console.file.getvalue()


class TestParseNumbers:
    @pytest.mark.unit
    def test_valid_numbers(self):
        assert _parse_numbers("1, 3,2", 3) == ([1, 3, 2], [])

    @pytest.mark.unit
    def test_duplicates_and_blanks(self):
        assert _parse_numbers("1,,1, ", 3) == ([1], [])

    @pytest.mark.unit
    def test_out_of_range_and_garbage(self):
        assert _parse_numbers("0, 4, two, 2", 3) == ([2], ["0", "4", "two"])


class TestText:
    @pytest.mark.unit
    def test_answer_is_stripped(self, prompter: Prompter):
        with patch("create_ps.prompts.Prompt.ask", return_value="  hello  "):
            assert prompter.text("Name?") == "hello"

    @pytest.mark.unit
    def test_validator_asks_again(self, prompter: Prompter):
        answers = ["not a url", "https://example.com"]

        def validator(value):
            return None if value.startswith("https://") else "bad url"

        with patch("create_ps.prompts.Prompt.ask", side_effect=answers) as ask:
            assert prompter.text("URL?", validator=validator) == "https://example.com"
        assert ask.call_count == 2
        assert "bad url" in _output(prompter)

    @pytest.mark.unit
    @pytest.mark.parametrize("error", [KeyboardInterrupt, EOFError])
    def test_interrupt_cancels(self, prompter: Prompter, error):
        with patch("create_ps.prompts.Prompt.ask", side_effect=error):
            with pytest.raises(UserCancelled):
                prompter.text("Name?")

    @pytest.mark.unit
    def test_non_string_default_is_ignored(self, prompter: Prompter):
        default = {"name": "Jane", "email": "jane@example.com"}
        with patch("create_ps.prompts.Prompt.get_input", return_value=""):
            assert prompter.text("Author?", default=default) == ""

    @pytest.mark.unit
    def test_empty_answer_takes_string_default(self, prompter: Prompter):
        with patch("create_ps.prompts.Prompt.get_input", return_value=""):
            assert prompter.text("License?", default="MIT") == "MIT"


class TestSelect:
    @pytest.mark.unit
    def test_returns_option_value(self, prompter: Prompter):
        with patch("create_ps.prompts.Prompt.ask", return_value="3") as ask:
            assert prompter.select("Pick one", OPTIONS) == "readme"
        assert ask.call_args.kwargs["choices"] == ["1", "2", "3"]
        assert "Pick one" in _output(prompter)

    @pytest.mark.unit
    def test_needs_options(self, prompter: Prompter):
        with pytest.raises(ValueError):
            prompter.select("Pick one", [])


class TestMultiselect:
    @pytest.mark.unit
    def test_defaults_are_offered(self, prompter: Prompter):
        with patch("create_ps.prompts.Prompt.ask", side_effect=lambda *a, **kw: kw["default"]):
            assert prompter.multiselect("Pick", OPTIONS, defaults=["src", "readme"]) == [
                "src",
                "readme",
            ]

    @pytest.mark.unit
    def test_bad_numbers_ask_again(self, prompter: Prompter):
        with patch("create_ps.prompts.Prompt.ask", side_effect=["9", "2"]):
            assert prompter.multiselect("Pick", OPTIONS) == ["test"]
        assert "Not a valid option: 9" in _output(prompter)

    @pytest.mark.unit
    def test_required_rejects_empty(self, prompter: Prompter):
        with patch("create_ps.prompts.Prompt.ask", side_effect=["", "1,2"]):
            assert prompter.multiselect("Pick", OPTIONS, required=True) == ["src", "test"]

    @pytest.mark.unit
    def test_optional_allows_empty(self, prompter: Prompter):
        with patch("create_ps.prompts.Prompt.ask", return_value=""):
            assert prompter.multiselect("Pick", OPTIONS) == []


class TestConfirm:
    @pytest.mark.unit
    def test_passes_default(self, prompter: Prompter):
        with patch("create_ps.prompts.Confirm.ask", return_value=False) as ask:
            assert prompter.confirm("Sure?", default=False) is False
        assert ask.call_args.kwargs["default"] is False

    @pytest.mark.unit
    def test_interrupt_cancels(self, prompter: Prompter):
        with patch("create_ps.prompts.Confirm.ask", side_effect=KeyboardInterrupt):
            with pytest.raises(UserCancelled):
                prompter.confirm("Sure?")
