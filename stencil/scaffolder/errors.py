"""Exceptions raised while loading, binding and rendering templates."""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for every fatal scaffolding failure."""


class SchemaError(ScaffoldError):
    """The context file is unreadable or does not describe a valid context."""


class InputError(ScaffoldError):
    """An interactive prompt failed or was aborted by the user."""


class TemplateRenderError(ScaffoldError):
    """A file name or content template failed to parse or evaluate."""

    def __init__(self, message: str, template_name: str = ""):
        self.template_name = template_name
        super().__init__(message)


class FilesystemError(ScaffoldError):
    """Creating, removing or writing an output entry failed."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class TemplateInvalidError(ScaffoldError):
    """Raised by validation when a template cannot be rendered."""
