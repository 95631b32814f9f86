"""Stencil scaffolder -- renders project templates into new projects.

A template root holds a context file (``project.json``) declaring the
variables and a ``template/`` directory whose file names and contents are
Jinja2 templates.  The context is bound to values (interactively or from
defaults) and the directory is rendered into a target.

Quick usage::

    from stencil.scaffolder import get_template

    template = get_template("path/to/template")
    report = template.execute("path/to/new-project")
"""

from stencil.scaffolder.binder import Binding, BindingTable, Mode, bind
from stencil.scaffolder.context import Choice, Group, Scalar, parse_context
from stencil.scaffolder.errors import (
    FilesystemError,
    InputError,
    ScaffoldError,
    SchemaError,
    TemplateInvalidError,
    TemplateRenderError,
)
from stencil.scaffolder.executor import RenderReport, execute
from stencil.scaffolder.generator import ProjectTemplate, get_template, load_context
from stencil.scaffolder.metadata import Metadata, read_metadata, serialize_metadata
from stencil.scaffolder.prompt import Prompter, RichPrompter
from stencil.scaffolder.pruner import prune_if_blank
from stencil.scaffolder.templates import TemplateRenderer
from stencil.scaffolder.validate import validate_template

__all__ = [
    "Binding",
    "BindingTable",
    "Choice",
    "FilesystemError",
    "Group",
    "InputError",
    "Metadata",
    "Mode",
    "ProjectTemplate",
    "Prompter",
    "RenderReport",
    "RichPrompter",
    "Scalar",
    "ScaffoldError",
    "SchemaError",
    "TemplateInvalidError",
    "TemplateRenderError",
    "TemplateRenderer",
    "bind",
    "execute",
    "get_template",
    "load_context",
    "parse_context",
    "prune_if_blank",
    "read_metadata",
    "serialize_metadata",
    "validate_template",
]
