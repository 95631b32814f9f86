"""Stencil configuration.

Typed settings for loading and rendering project templates. Settings use a
Pydantic v2 model so they are validated at construction time and can be built
from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


class Config(BaseModel):
    """Global stencil configuration.

    Names the files that make up a template root and toggles how a render
    runs.  Instances are created once by the CLI (or by callers embedding
    the engine) and passed to the loader and the generator.
    """

    context_file_name: str = Field(
        default="project.json", description="Context file inside the template root"
    )
    template_dir_name: str = Field(
        default="template", description="Directory walked by the executor"
    )
    metadata_file_name: str = Field(
        default="__metadata.json", description="Metadata record written next to output"
    )
    use_defaults: bool = Field(
        default=False, description="Skip prompting and render every default value"
    )
    write_metadata: bool = Field(
        default=True, description="Persist a metadata record into the target directory"
    )
    verbose: bool = Field(default=False, description="Enable debug logging")

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def context_path(self, template_root: Path) -> Path:
        """Path of the context file for *template_root*."""
        return Path(template_root) / self.context_file_name

    def template_path(self, template_root: Path) -> Path:
        """Path of the source directory for *template_root*."""
        return Path(template_root) / self.template_dir_name

    def metadata_path(self, directory: Path) -> Path:
        """Path of the metadata record inside *directory*."""
        return Path(directory) / self.metadata_file_name

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STENCIL_USE_DEFAULTS, STENCIL_WRITE_METADATA, STENCIL_VERBOSE,
            STENCIL_CONTEXT_FILE, STENCIL_TEMPLATE_DIR.
        """
        kwargs: dict[str, Any] = {
            "use_defaults": _env_flag("STENCIL_USE_DEFAULTS", False),
            "write_metadata": _env_flag("STENCIL_WRITE_METADATA", True),
            "verbose": _env_flag("STENCIL_VERBOSE", False),
        }
        if os.environ.get("STENCIL_CONTEXT_FILE"):
            kwargs["context_file_name"] = os.environ["STENCIL_CONTEXT_FILE"]
        if os.environ.get("STENCIL_TEMPLATE_DIR"):
            kwargs["template_dir_name"] = os.environ["STENCIL_TEMPLATE_DIR"]
        return cls(**kwargs)
