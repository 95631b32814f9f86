"""Jinja2 environment for rendering template names and contents.

Provides the ``TemplateRenderer`` class which wraps a Jinja2 environment
whose variable lookups are answered by a ``BindingTable``.  Jinja looks up
every name a template mentions before it starts rendering, so bindings are
handed out as ``LazyBinding`` placeholders that resolve (prompting if
needed) only when the template actually uses the value.  A variable that
only appears in an untaken ``{% if %}`` branch is therefore never asked
for.  The same environment renders relative paths and file contents, with
a small library of helper filters and functions registered on it.
"""

from __future__ import annotations

import base64
import functools
import getpass
import operator
import re
import secrets
import socket
import string
import uuid as _uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, IO

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template
from jinja2.runtime import Context

from .binder import BindingTable


# ---------------------------------------------------------------------------
# Lazy binding values
# ---------------------------------------------------------------------------


def _forward(func: Callable[..., Any]) -> Callable[..., Any]:
    def method(self: "LazyBinding", *args: Any) -> Any:
        return func(self.value, *args)

    return method


def _reflect(func: Callable[[Any, Any], Any]) -> Callable[..., Any]:
    def method(self: "LazyBinding", other: Any) -> Any:
        return func(other, self.value)

    return method


class LazyBinding:
    """Stands in for a binding until the template uses its value.

    Converting, testing, comparing, iterating or doing arithmetic on the
    placeholder resolves the binding and acts on the resolved value.
    Filters, tests and helper functions receive the resolved value (see
    ``unwrapping``).
    """

    __slots__ = ("_bindings", "_name")

    def __init__(self, bindings: BindingTable, name: str) -> None:
        self._bindings = bindings
        self._name = name

    @property
    def value(self) -> Any:
        return self._bindings.resolve(self._name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return getattr(self.value, name)

    def __repr__(self) -> str:
        return f"<LazyBinding {self._name}>"

    __str__ = _forward(str)
    __bool__ = _forward(bool)
    __int__ = _forward(int)
    __float__ = _forward(float)
    __index__ = _forward(operator.index)
    __round__ = _forward(round)
    __hash__ = _forward(hash)
    __len__ = _forward(len)
    __iter__ = _forward(iter)
    __contains__ = _forward(operator.contains)
    __getitem__ = _forward(operator.getitem)
    __format__ = _forward(format)
    __neg__ = _forward(operator.neg)
    __abs__ = _forward(abs)

    __eq__ = _forward(operator.eq)
    __ne__ = _forward(operator.ne)
    __lt__ = _forward(operator.lt)
    __le__ = _forward(operator.le)
    __gt__ = _forward(operator.gt)
    __ge__ = _forward(operator.ge)

    __add__ = _forward(operator.add)
    __sub__ = _forward(operator.sub)
    __mul__ = _forward(operator.mul)
    __truediv__ = _forward(operator.truediv)
    __floordiv__ = _forward(operator.floordiv)
    __mod__ = _forward(operator.mod)
    __pow__ = _forward(operator.pow)
    __radd__ = _reflect(operator.add)
    __rsub__ = _reflect(operator.sub)
    __rmul__ = _reflect(operator.mul)
    __rtruediv__ = _reflect(operator.truediv)
    __rfloordiv__ = _reflect(operator.floordiv)
    __rmod__ = _reflect(operator.mod)
    __rpow__ = _reflect(operator.pow)


def unwrap(value: Any) -> Any:
    """Return the resolved value behind a ``LazyBinding`` (else *value*)."""
    if type(value) is LazyBinding:
        return value.value
    return value


def unwrapping(func: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap *func* so every ``LazyBinding`` argument arrives resolved.

    ``functools.wraps`` carries Jinja's ``pass_context`` style markers
    over, so wrapped filters keep receiving their context first.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(
            *[unwrap(arg) for arg in args],
            **{key: unwrap(value) for key, value in kwargs.items()},
        )

    return wrapper


# Asking whether a binding is defined must not prompt for it.
_LAZY_TESTS = {"defined", "undefined"}


def _json_default(value: Any) -> Any:
    if type(value) is LazyBinding:
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


# ---------------------------------------------------------------------------
# Binding-aware environment
# ---------------------------------------------------------------------------


class BindingContext(Context):
    """Template context that looks variables up in the binding table.

    Lookup order: variables assigned by the template itself, then bindings,
    then the environment globals (helper functions).
    """

    def resolve_or_missing(self, key: str) -> Any:
        if key in self.vars:
            return self.vars[key]
        bindings = getattr(self.environment, "bindings", None)
        if bindings is not None and key in bindings:
            return LazyBinding(bindings, key)
        return super().resolve_or_missing(key)


class BindingEnvironment(Environment):
    """Jinja2 environment carrying the binding table of one render."""

    context_class = BindingContext

    def __init__(self, bindings: BindingTable, **options: Any) -> None:
        super().__init__(**options)
        self.bindings = bindings


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template names and files against a binding table.

    File templates are loaded from *template_dir* so that ``{% include %}``
    and ``{% import %}`` can refer to sibling files by relative path.
    """

    def __init__(
        self,
        bindings: BindingTable,
        template_dir: str | Path | None = None,
    ) -> None:
        self.bindings = bindings
        self.template_dir = Path(template_dir) if template_dir is not None else None
        loader = FileSystemLoader(str(self.template_dir)) if self.template_dir else None
        self.env = BindingEnvironment(
            bindings,
            loader=loader,
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        register_helpers(self.env)
        for table in (self.env.filters, self.env.tests):
            for name, func in list(table.items()):
                if name not in _LAZY_TESTS:
                    table[name] = unwrapping(func)
        self.env.policies["json.dumps_kwargs"] = {"sort_keys": True, "default": _json_default}

    def render_string(self, template_string: str) -> str:
        """Render an inline template string, e.g. a relative path."""
        return self.env.from_string(template_string).render()

    def get_template(self, name: str, newline: str = "\n") -> Template:
        """Load and compile the file template *name* (posix, relative).

        Output line breaks use *newline* (``"\\n"``, ``"\\r\\n"`` or ``"\\r"``).
        """
        env = self.env
        if newline != env.newline_sequence:
            env = env.overlay(newline_sequence=newline, cache_size=0)
        return env.get_template(name)

    def render_to_stream(self, name: str, stream: IO[str], newline: str = "\n") -> None:
        """Render the file template *name* straight into *stream*."""
        self.get_template(name, newline).stream().dump(stream)


# ---------------------------------------------------------------------------
# Helper library
# ---------------------------------------------------------------------------


def register_helpers(env: Environment) -> None:
    """Install the stencil filters and global functions on *env*."""
    env.filters["slugify"] = _slugify_filter
    env.filters["pascal_case"] = _pascal_case_filter
    env.filters["snake_case"] = _snake_case_filter
    env.filters["camel_case"] = _camel_case_filter
    env.filters["kebab_case"] = _kebab_case_filter
    env.filters["to_binary"] = _to_binary_filter
    env.filters["format_filesize"] = _format_filesize_filter
    env.globals.update(
        uuid=_uuid_func,
        password=unwrapping(_password_func),
        random_base64=unwrapping(_random_base64_func),
        hostname=socket.gethostname,
        username=getpass.getuser,
        now=unwrapping(_now_func),
        today=unwrapping(_today_func),
    )


def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", str(value).lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", str(value))
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", str(value))
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-_\s]+", "_", s2).lower()


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def _kebab_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some_thing`` to ``some-thing``."""
    return _snake_case_filter(value).replace("_", "-")


def _to_binary_filter(value: int) -> str:
    return format(int(value), "b")


_SIZE_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB")


def _format_filesize_filter(value: float) -> str:
    """Human readable decimal size: ``1536`` -> ``1.536kB``."""
    size = float(value)
    unit = 0
    while size >= 1000.0 and unit < len(_SIZE_UNITS) - 1:
        size /= 1000.0
        unit += 1
    return f"{size:.4g}{_SIZE_UNITS[unit]}"


def _uuid_func() -> str:
    return str(_uuid.uuid4())


def _password_func(length: int = 14, digits: int = 4, symbols: int = 0) -> str:
    """Random password with exactly *digits* digits and *symbols* symbols."""
    if digits + symbols > length:
        raise ValueError(
            f"password(): {digits} digits and {symbols} symbols exceed length {length}"
        )
    chars = [secrets.choice(string.digits) for _ in range(digits)]
    chars += [secrets.choice("~!@#$%^&*()_+-={}[]|:;<>,.?/") for _ in range(symbols)]
    chars += [
        secrets.choice(string.ascii_letters) for _ in range(length - digits - symbols)
    ]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def _random_base64_func(n: int = 32) -> str:
    """Base64 encoding of *n* random bytes."""
    return base64.b64encode(secrets.token_bytes(int(n))).decode("ascii")


def _now_func(fmt: str | None = None) -> datetime | str:
    current = datetime.now()
    return current.strftime(fmt) if fmt else current


def _today_func(fmt: str = "%Y-%m-%d") -> str:
    return date.today().strftime(fmt)
