"""Value resolver: turns a ``ContextTree`` into a ``BindingTable``.

Every variable reachable from the context gets exactly one ``Binding``
record naming its default, the gate it depends on (for group children) and
how it is resolved.  The table is built once per render and never changes
afterwards; only the memoized answers fill in as templates ask for values.

Resolution rules:

- ``DEFAULTS`` mode: every binding yields its default (the first option of
  a choice) and every group gate yields ``False``.
- ``INTERACTIVE`` mode: top-level variables are prompted.  A group's key is
  bound to a yes/no gate; its children are prompted only when the gate is
  answered yes and otherwise fall back to their defaults without asking.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable

from .context import ContextTree, Group, Leaf, Scalar
from .prompt import Prompter, RichPrompter

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """How values are obtained."""

    INTERACTIVE = "interactive"
    DEFAULTS = "defaults"


class Strategy(str, Enum):
    """How a single binding produces its value."""

    DEFAULT = "default"  # constant default
    PROMPT = "prompt"  # ask the user, seeded with the default
    GATE = "gate"  # yes/no confirmation for a group


@dataclass(frozen=True)
class Binding:
    """One entry of the binding table."""

    name: str
    value: Leaf
    strategy: Strategy
    gate: str | None = None

    @property
    def default(self) -> Any:
        return self.value.default


_GATE_DEFAULT = Scalar(False)


class BindingTable(Mapping[str, Binding]):
    """Immutable name -> ``Binding`` table with memoized resolution.

    Indexing returns the ``Binding`` record; ``resolve`` returns the value.
    Each binding is resolved at most once per table, so a prompt-backed
    variable referenced from many templates asks the user a single time.
    """

    def __init__(
        self,
        bindings: Mapping[str, Binding],
        prompter: Prompter | None = None,
    ) -> None:
        self._bindings = MappingProxyType(dict(bindings))
        self._prompter = prompter
        self._answers: dict[str, Any] = {}

    def __getitem__(self, name: str) -> Binding:
        return self._bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"BindingTable({list(self._bindings)!r})"

    @property
    def answers(self) -> dict[str, Any]:
        """Snapshot of the values resolved so far."""
        return dict(self._answers)

    def resolve(self, name: str) -> Any:
        """Return the value of *name*, resolving and memoizing it on first use.

        Raises:
            KeyError: If *name* is not bound.
            InputError: If a prompt is aborted.
        """
        if name in self._answers:
            return self._answers[name]

        binding = self._bindings[name]
        if binding.gate is not None and not self.resolve(binding.gate):
            value = binding.default
        elif binding.strategy is Strategy.PROMPT:
            value = self._require_prompter().ask(name, binding.value)
        elif binding.strategy is Strategy.GATE:
            value = bool(self._require_prompter().confirm(name, binding.default))
        else:
            value = binding.default

        logger.debug("Resolved %s = %r (%s)", name, value, binding.strategy.value)
        self._answers[name] = value
        return value

    def function(self, name: str) -> Callable[[], Any]:
        """Zero-argument callable that resolves *name*."""
        if name not in self._bindings:
            raise KeyError(name)
        return functools.partial(self.resolve, name)

    def _require_prompter(self) -> Prompter:
        if self._prompter is None:
            self._prompter = RichPrompter()
        return self._prompter


def bind(
    context: ContextTree,
    mode: Mode = Mode.INTERACTIVE,
    prompter: Prompter | None = None,
) -> BindingTable:
    """Build the binding table for *context*.

    Args:
        context: Parsed context tree (may be empty).
        mode: ``Mode.INTERACTIVE`` to prompt, ``Mode.DEFAULTS`` to use defaults.
        prompter: Prompt implementation for interactive mode.  Defaults to a
            ``RichPrompter`` created on first use.

    Returns:
        A ``BindingTable`` with one binding per variable, including one gate
        per non-empty group.
    """
    interactive = mode is Mode.INTERACTIVE
    leaf_strategy = Strategy.PROMPT if interactive else Strategy.DEFAULT
    bindings: dict[str, Binding] = {}

    for key, value in context.items():
        if isinstance(value, Group):
            if not value.children:
                continue
            bindings[key] = Binding(
                name=key,
                value=_GATE_DEFAULT,
                strategy=Strategy.GATE if interactive else Strategy.DEFAULT,
            )
            for child_key, child_value in value.children.items():
                bindings[child_key] = Binding(
                    name=child_key,
                    value=child_value,
                    strategy=leaf_strategy,
                    gate=key,
                )
        else:
            bindings[key] = Binding(name=key, value=value, strategy=leaf_strategy)

    return BindingTable(bindings, prompter if interactive else None)
