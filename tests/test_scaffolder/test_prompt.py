"""Tests for the rich-based terminal prompter."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from stencil.scaffolder.context import Choice, Scalar
from stencil.scaffolder.errors import InputError
from stencil.scaffolder.prompt import RichPrompter


pytestmark = pytest.mark.unit

_MODULE = "stencil.scaffolder.prompt"


class TestRichPrompter:
    def test_string_prompt_prefills_default(self):
        with patch(f"{_MODULE}.Prompt.ask", return_value="shop") as ask:
            assert RichPrompter().ask("name", Scalar("demo")) == "shop"
        assert ask.call_args.kwargs["default"] == "demo"

    def test_int_prompt(self):
        with patch(f"{_MODULE}.IntPrompt.ask", return_value=9000) as ask:
            assert RichPrompter().ask("port", Scalar(8000)) == 9000
        assert ask.call_args.kwargs["default"] == 8000

    def test_float_prompt(self):
        with patch(f"{_MODULE}.FloatPrompt.ask", return_value=0.25):
            assert RichPrompter().ask("ratio", Scalar(0.5)) == 0.25

    def test_bool_uses_confirm(self):
        with patch(f"{_MODULE}.Confirm.ask", return_value=False) as ask:
            assert RichPrompter().ask("debug", Scalar(True)) is False
        assert ask.call_args.kwargs["default"] is True

    def test_choice_returns_original_option(self):
        with patch(f"{_MODULE}.Prompt.ask", return_value="3") as ask:
            assert RichPrompter().ask("workers", Choice((1, 2, 3))) == 3
        assert ask.call_args.kwargs["choices"] == ["1", "2", "3"]
        assert ask.call_args.kwargs["default"] == "1"

    def test_confirm_gate(self):
        with patch(f"{_MODULE}.Confirm.ask", return_value=True) as ask:
            assert RichPrompter().confirm("database") is True
        assert ask.call_args.kwargs["default"] is False
        assert "database" in ask.call_args.args[0]

    @pytest.mark.parametrize("error", [KeyboardInterrupt, EOFError])
    def test_interrupted_prompt(self, error):
        with patch(f"{_MODULE}.Prompt.ask", side_effect=error):
            with pytest.raises(InputError, match="name"):
                RichPrompter().ask("name", Scalar("demo"))

    def test_interrupted_confirm(self):
        with patch(f"{_MODULE}.Confirm.ask", side_effect=KeyboardInterrupt):
            with pytest.raises(InputError):
                RichPrompter().confirm("database")
