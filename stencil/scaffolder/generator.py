"""Project template loading and execution.

``get_template`` reads a template root (context file, source directory and
metadata) into a ``ProjectTemplate``.  Executing it binds the context
(prompting or using defaults) and renders the source tree into a target
directory.

Quick usage::

    from stencil.scaffolder import get_template

    template = get_template("~/templates/python-lib")
    template.use_default_values()
    report = template.execute("/tmp/my-lib")
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ..config import Config
from .binder import BindingTable, Mode, bind
from .context import ContextTree, parse_context
from .errors import FilesystemError, SchemaError
from .executor import FileCallback, RenderReport, execute
from .metadata import Metadata, creation_time
from .prompt import Prompter

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Context file loading
# ---------------------------------------------------------------------------


def _context_candidates(template_root: Path, config: Config) -> list[Path]:
    primary = config.context_path(template_root)
    stem = primary.with_suffix("")
    return [primary] + [
        stem.with_suffix(suffix)
        for suffix in (".yaml", ".yml")
        if stem.with_suffix(suffix) != primary
    ]


def _decode(path: Path, raw: str) -> Any:
    if path.suffix in (".yaml", ".yml"):
        return yaml.safe_load(raw)
    return json.loads(raw)


def load_context(template_root: str | Path, config: Config | None = None) -> ContextTree:
    """Read and validate the context file of *template_root*.

    A missing context file means "no variables" and yields an empty tree.

    Raises:
        SchemaError: If the file can't be read, decoded or validated.
    """
    config = config or Config()
    root = Path(template_root)

    for candidate in _context_candidates(root, config):
        if not candidate.is_file():
            continue
        logger.debug("Loading context from %s", candidate)
        try:
            raw = candidate.read_text(encoding="utf-8")
            data = _decode(candidate, raw)
        except (OSError, UnicodeDecodeError) as exc:
            raise SchemaError(f"Couldn't read context file {candidate}: {exc}") from exc
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise SchemaError(f"Malformed context file {candidate}: {exc}") from exc
        return parse_context(data)

    logger.debug("No context file under %s", root)
    return {}


# ---------------------------------------------------------------------------
# ProjectTemplate
# ---------------------------------------------------------------------------


@dataclass
class ProjectTemplate:
    """A loaded template root, ready to be executed."""

    path: Path
    context: ContextTree = field(default_factory=dict)
    metadata: Optional[Metadata] = None
    should_use_defaults: bool = False

    def use_default_values(self) -> None:
        """Render with default values instead of prompting."""
        self.should_use_defaults = True

    def info(self) -> Optional[Metadata]:
        """Metadata of the template."""
        return self.metadata

    @property
    def mode(self) -> Mode:
        return Mode.DEFAULTS if self.should_use_defaults else Mode.INTERACTIVE

    def bind(self, prompter: Prompter | None = None) -> BindingTable:
        """Build a fresh binding table for one render."""
        return bind(self.context, self.mode, prompter)

    def execute(
        self,
        target_dir: str | Path,
        *,
        prompter: Prompter | None = None,
        on_file: Optional[FileCallback] = None,
    ) -> RenderReport:
        """Render the template into *target_dir*.

        *on_file* is not called when rendering with default values.
        """
        bindings = self.bind(prompter)
        notify = None if self.should_use_defaults else on_file
        return execute(self.path, target_dir, bindings, on_file=notify)


def get_template(path: str | Path, config: Config | None = None) -> ProjectTemplate:
    """Load the template rooted at *path*.

    Raises:
        FilesystemError: If *path* is not a directory.
        SchemaError: If the context file is malformed.
    """
    config = config or Config()
    root = Path(path).expanduser().resolve()
    if not root.is_dir():
        raise FilesystemError(f"Template not found: {root}", str(root))

    context = load_context(root, config)
    metadata = Metadata(tag=root.name, repository=str(root), created=creation_time(root))

    return ProjectTemplate(
        path=config.template_path(root),
        context=context,
        metadata=metadata,
        should_use_defaults=config.use_defaults,
    )
