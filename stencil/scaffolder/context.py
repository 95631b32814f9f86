"""Context model: the variable schema declared by a template.

A context file maps variable names to one of three shapes:

- a scalar default (string, number or boolean),
- a list of scalars whose first element is the default (a *choice*),
- a group: a mapping of child names to scalars or choices, exposed only
  when the user opts into the group's advanced settings.

``parse_context`` turns the raw decoded document into ``Scalar``, ``Choice``
and ``Group`` values and rejects anything else with a ``SchemaError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .errors import SchemaError


# ---------------------------------------------------------------------------
# Context values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Scalar:
    """A single default value."""

    value: str | int | float | bool

    @property
    def default(self) -> str | int | float | bool:
        return self.value


@dataclass(frozen=True)
class Choice:
    """A list of options; the first one is the default."""

    options: tuple[str | int | float | bool, ...]

    @property
    def default(self) -> str | int | float | bool:
        return self.options[0]


@dataclass(frozen=True)
class Group:
    """Variables gated behind an advanced-settings confirmation."""

    children: dict[str, Scalar | Choice] = field(default_factory=dict)


Leaf = Union[Scalar, Choice]
ContextValue = Union[Scalar, Choice, Group]
ContextTree = dict[str, ContextValue]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def _parse_leaf(name: str, raw: Any) -> Leaf:
    if _is_scalar(raw):
        return Scalar(raw)
    if isinstance(raw, list):
        if not raw:
            raise SchemaError(f"Variable {name!r} has an empty list of options")
        bad = [item for item in raw if not _is_scalar(item)]
        if bad:
            raise SchemaError(
                f"Variable {name!r} lists non-scalar options: {bad!r}"
            )
        return Choice(tuple(raw))
    if raw is None:
        raise SchemaError(f"Variable {name!r} has no default value (null)")
    raise SchemaError(
        f"Variable {name!r} has unsupported value of type {type(raw).__name__}"
    )


def parse_context(raw: Any) -> ContextTree:
    """Validate a decoded context document and build a ``ContextTree``.

    Args:
        raw: The decoded JSON/YAML document.  ``None`` means "no variables".

    Returns:
        Mapping of top-level name to ``Scalar``, ``Choice`` or ``Group``, in
        document order.

    Raises:
        SchemaError: On any shape the context model does not describe,
            including groups nested in groups and duplicate names.
    """
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise SchemaError(
            f"Context must be a mapping of variable names, got {type(raw).__name__}"
        )

    tree: ContextTree = {}
    owners: dict[str, str] = {}

    def claim(name: str, owner: str) -> None:
        if not isinstance(name, str) or not name:
            raise SchemaError(f"Variable names must be non-empty strings, got {name!r}")
        if name in owners:
            raise SchemaError(
                f"Variable {name!r} in {owner} is already defined in {owners[name]}"
            )
        owners[name] = owner

    for key, value in raw.items():
        claim(key, "the top level")
        if isinstance(value, Mapping):
            children: dict[str, Leaf] = {}
            for child_key, child_value in value.items():
                claim(child_key, f"group {key!r}")
                if isinstance(child_value, Mapping):
                    raise SchemaError(
                        f"Group {key!r} nests another group under {child_key!r}; "
                        "only one level of grouping is supported"
                    )
                children[child_key] = _parse_leaf(child_key, child_value)
            tree[key] = Group(children)
        else:
            tree[key] = _parse_leaf(key, value)

    return tree
