"""Command line entry point.

Examples::

    stencil use ~/templates/python-lib ./my-lib
    stencil use ~/templates/python-lib ./my-lib --use-defaults
    stencil validate ~/templates/python-lib
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.markup import escape

from . import __version__
from .config import Config
from .scaffolder.errors import ScaffoldError
from .scaffolder.generator import get_template
from .scaffolder.metadata import serialize_metadata
from .scaffolder.validate import validate_template
from .utils import (
    configure_logging,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stencil",
        description="Scaffold new projects from directory templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stencil use ./templates/python-lib ./my-lib\n"
            "  stencil use ./templates/python-lib ./my-lib --use-defaults\n"
            "  stencil validate ./templates/python-lib\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subcommands = parser.add_subparsers(dest="command", required=True)

    use = subcommands.add_parser("use", help="Render a template into a target directory")
    use.add_argument("template", help="Path to the template root")
    use.add_argument("target", help="Directory to render into")
    use.add_argument(
        "--use-defaults", "-f",
        action="store_true",
        help="Don't prompt; render every variable with its default value",
    )
    use.add_argument(
        "--no-metadata",
        action="store_true",
        help="Don't write a metadata record into the target directory",
    )

    validate = subcommands.add_parser("validate", help="Validate a local template")
    validate.add_argument("template", help="Path to the template root")

    return parser


def _use(args: argparse.Namespace, config: Config) -> None:
    template = get_template(args.template, config)
    target = Path(args.target)

    if target.is_dir() and any(target.iterdir()):
        print_warning(
            f"{escape(str(target))} is not empty; rendered files will replace existing ones"
        )

    report = template.execute(
        target,
        on_file=lambda name: print_success(f"Created {escape(str(name))}"),
    )

    summary = {
        "Template": template.metadata.tag if template.metadata else args.template,
        "Target": str(target),
        "Files written": str(len(report.written)),
        "Blank files skipped": str(len(report.pruned)),
    }
    if config.write_metadata and template.metadata is not None:
        serialize_metadata(
            template.metadata.tag,
            template.metadata.repository,
            target,
            config.metadata_file_name,
        )
        summary["Metadata"] = str(config.metadata_path(target))

    if not config.use_defaults:
        print_summary_table(summary, title="Scaffold complete")
    print_success(f"Successfully rendered {escape(args.template)} into {escape(str(target))}")


def _validate(args: argparse.Namespace, config: Config) -> None:
    report = validate_template(args.template, config)
    print_success(
        f"Template is valid ({len(report.written)} file(s) rendered with defaults)"
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``stencil`` / ``python -m stencil``."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env()
    except ValueError as exc:
        print_error(f"Error: {escape(str(exc))}")
        return 1
    if args.verbose:
        config.verbose = True
    if getattr(args, "use_defaults", False):
        config.use_defaults = True
    if getattr(args, "no_metadata", False):
        config.write_metadata = False

    configure_logging(config.verbose)
    logger.debug("Config: %s", config.model_dump())

    try:
        if args.command == "use":
            _use(args, config)
        else:
            _validate(args, config)
    except ScaffoldError as exc:
        print_error(f"Error: {escape(str(exc))}")
        return 1
    except KeyboardInterrupt:
        print_error("Aborted")
        return 1

    return 0
