"""Shared pytest fixtures for the stencil test suite.

Provides reusable fixtures for:
- Building template roots (context file + template directory) on disk
- A recording prompter that answers prompts from canned values
- Snapshotting a rendered directory tree
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from stencil.scaffolder.context import Leaf
from stencil.scaffolder.errors import InputError


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------


class RecordingPrompter:
    """Prompter double: answers from dicts and records every question.

    Variables without a canned answer get their default; gates without a
    canned answer are declined.
    """

    def __init__(
        self,
        answers: dict[str, Any] | None = None,
        confirms: dict[str, bool] | None = None,
    ) -> None:
        self.answers = answers or {}
        self.confirms = confirms or {}
        self.calls: list[tuple[str, str]] = []

    def ask(self, name: str, value: Leaf) -> Any:
        self.calls.append(("ask", name))
        if name in self.answers:
            return self.answers[name]
        return value.default

    def confirm(self, name: str, default: bool = False) -> bool:
        self.calls.append(("confirm", name))
        return self.confirms.get(name, default)

    def asked(self) -> list[str]:
        return [name for kind, name in self.calls if kind == "ask"]

    def confirmed(self) -> list[str]:
        return [name for kind, name in self.calls if kind == "confirm"]


class AbortingPrompter(RecordingPrompter):
    """Prompter double that behaves like a user pressing Ctrl-C."""

    def ask(self, name: str, value: Leaf) -> Any:
        self.calls.append(("ask", name))
        raise InputError(f"Prompt for {name!r} was aborted")


@pytest.fixture
def prompter() -> RecordingPrompter:
    """A prompter that accepts every default."""
    return RecordingPrompter()


@pytest.fixture
def make_prompter() -> type[RecordingPrompter]:
    """The ``RecordingPrompter`` class, for tests that need canned answers."""
    return RecordingPrompter


@pytest.fixture
def aborting_prompter() -> AbortingPrompter:
    return AbortingPrompter()


# ---------------------------------------------------------------------------
# Template roots
# ---------------------------------------------------------------------------


@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a template root under ``tmp_path``.

    Usage::

        root = make_template({"README.md": "# {{ name }}\\n"}, context={"name": "demo"})
    """

    def _make(
        files: dict[str, str],
        context: dict[str, Any] | None = None,
        name: str = "demo-template",
        dirs: list[str] | None = None,
    ) -> Path:
        root = tmp_path / name
        source = root / "template"
        source.mkdir(parents=True)
        for directory in dirs or []:
            (source / directory).mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = source / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        if context is not None:
            (root / "project.json").write_text(json.dumps(context), encoding="utf-8")
        return root

    return _make


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Destination directory for rendered output (not created)."""
    return tmp_path / "output"


def snapshot(root: Path) -> dict[str, str | None]:
    """Map every path under *root* to its text (``None`` for directories)."""
    result: dict[str, str | None] = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        result[rel] = None if path.is_dir() else path.read_text(encoding="utf-8")
    return result


@pytest.fixture
def tree_snapshot() -> Callable[[Path], dict[str, str | None]]:
    return snapshot
