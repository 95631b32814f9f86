"""Interactive prompts used by prompt-backed bindings.

The binder only depends on the ``Prompter`` protocol; ``RichPrompter`` is
the terminal implementation built on ``rich.prompt``.
"""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt

from .context import Choice, Leaf
from .errors import InputError


class Prompter(Protocol):
    """Asks the user for variable values."""

    def ask(self, name: str, value: Leaf) -> str | int | float | bool:
        """Ask for *name*, offering the default (or options) held by *value*."""
        ...

    def confirm(self, name: str, default: bool = False) -> bool:
        """Ask a yes/no question about *name*."""
        ...


class RichPrompter:
    """Prompts on the terminal through ``rich.prompt``.

    Strings are free-form with the default pre-filled, numbers are parsed
    back to the default's type, booleans become confirmations, and choices
    list their options and return the picked option unchanged.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console

    def ask(self, name: str, value: Leaf) -> str | int | float | bool:
        try:
            if isinstance(value, Choice):
                return self._ask_choice(name, value)
            default = value.default
            if isinstance(default, bool):
                return Confirm.ask(_label(name), default=default, console=self.console)
            if isinstance(default, int):
                return IntPrompt.ask(_label(name), default=default, console=self.console)
            if isinstance(default, float):
                return FloatPrompt.ask(_label(name), default=default, console=self.console)
            return Prompt.ask(_label(name), default=default, console=self.console)
        except (KeyboardInterrupt, EOFError) as exc:
            raise InputError(f"Prompt for {name!r} was aborted") from exc

    def confirm(self, name: str, default: bool = False) -> bool:
        question = f"Use advanced settings for [bold]{name}[/bold]?"
        try:
            return Confirm.ask(question, default=default, console=self.console)
        except (KeyboardInterrupt, EOFError) as exc:
            raise InputError(f"Prompt for {name!r} was aborted") from exc

    def _ask_choice(self, name: str, value: Choice) -> str | int | float | bool:
        labels = [str(option) for option in value.options]
        picked = Prompt.ask(
            _label(name),
            choices=labels,
            default=labels[0],
            console=self.console,
        )
        return value.options[labels.index(picked)]


def _label(name: str) -> str:
    return f"Please choose a value for [bold cyan]{name}[/bold cyan]"
