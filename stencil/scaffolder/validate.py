"""Template validation: a dry render with default values."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from ..config import Config
from .errors import ScaffoldError, TemplateInvalidError
from .executor import RenderReport
from .generator import get_template

logger = logging.getLogger(__name__)


def validate_template(path: str | Path, config: Config | None = None) -> RenderReport:
    """Check that the template at *path* loads and renders with defaults.

    The render goes to a throwaway directory that is removed afterwards.

    Returns:
        The report of the dry render.

    Raises:
        TemplateInvalidError: Wrapping whatever made the template unusable.
    """
    config = config or Config()
    try:
        template = get_template(path, config)
        if not template.path.is_dir():
            raise TemplateInvalidError(
                f"Template has no {config.template_dir_name!r} directory: {template.path.parent}"
            )
        template.use_default_values()
        with tempfile.TemporaryDirectory(prefix="stencil-validate-") as scratch:
            report = template.execute(scratch)
    except TemplateInvalidError:
        raise
    except ScaffoldError as exc:
        raise TemplateInvalidError(f"Template {path} is invalid: {exc}") from exc

    logger.debug("Template %s rendered %d file(s)", path, len(report.written))
    return report
