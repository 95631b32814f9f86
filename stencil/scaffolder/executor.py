"""Template executor: renders a source tree into a destination directory.

The walk is sequential and depth-first in lexical order.  For every entry
the path relative to the source root is itself rendered as a template, so
directory and file names can depend on variables.  Directories are created
(existing ones are fine); files replace whatever exists at the rendered
path, keep the source permission bits, and are pruned afterwards when they
rendered to whitespace only.

Any error aborts the walk.  Files written before the failure stay on disk.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .binder import BindingTable
from .errors import FilesystemError, ScaffoldError, TemplateRenderError
from .pruner import prune_if_blank
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)

DIR_MODE = 0o755

FileCallback = Callable[[Path], None]


@dataclass
class RenderReport:
    """What a render produced, as paths relative to the destination."""

    directories: list[Path] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    pruned: list[Path] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Walking
# ---------------------------------------------------------------------------


def walk_template(root: Path) -> Iterator[Path]:
    """Yield *root* and everything below it, depth-first in name order.

    Symlinks to directories are skipped.
    """
    yield root
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if entry.is_symlink() and entry.is_dir():
            logger.warning("Skipping symlinked directory %s", entry)
        elif entry.is_dir():
            yield from walk_template(entry)
        else:
            yield entry


def render_name(renderer: TemplateRenderer, relative: str) -> Path:
    """Render a relative path template into a clean relative ``Path``.

    Empty and ``.`` segments collapse, so a directory whose name renders
    empty merges into its parent.  ``..`` segments are rejected.
    """
    try:
        rendered = renderer.render_string(relative)
    except ScaffoldError:
        raise
    except Exception as exc:
        raise TemplateRenderError(
            f"Couldn't render file name {relative!r}: {exc}", relative
        ) from exc

    parts = [part for part in rendered.replace(os.sep, "/").split("/") if part not in ("", ".")]
    if ".." in parts:
        raise TemplateRenderError(
            f"File name {relative!r} rendered to {rendered!r}, which leaves the target directory",
            relative,
        )
    return Path(*parts)


# ---------------------------------------------------------------------------
# Entry handlers
# ---------------------------------------------------------------------------


def _make_directory(target: Path) -> None:
    try:
        target.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Couldn't create directory {target}: {exc}", str(target)) from exc


def detect_newline(data: bytes) -> str:
    """Line break convention of *data*: ``\\r\\n``, ``\\r`` or ``\\n``."""
    if b"\r\n" in data:
        return "\r\n"
    if b"\r" in data:
        return "\r"
    return "\n"


def _render_file(renderer: TemplateRenderer, source: Path, name: str, target: Path) -> None:
    try:
        mode = stat.S_IMODE(source.stat().st_mode)
        newline = detect_newline(source.read_bytes())
    except OSError as exc:
        raise FilesystemError(f"Couldn't read {source}: {exc}", str(source)) from exc

    try:
        target.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise FilesystemError(f"Couldn't replace {target}: {exc}", str(target)) from exc

    try:
        target.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        fd = os.open(target, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, mode)
    except OSError as exc:
        raise FilesystemError(f"Couldn't create {target}: {exc}", str(target)) from exc

    with os.fdopen(fd, "w", encoding="utf-8", newline="") as stream:
        try:
            renderer.render_to_stream(name, stream, newline)
        except ScaffoldError:
            raise
        except OSError as exc:
            raise FilesystemError(f"Couldn't write {target}: {exc}", str(target)) from exc
        except Exception as exc:
            raise TemplateRenderError(f"Couldn't render {name!r}: {exc}", name) from exc

    try:
        os.chmod(target, mode)
    except OSError as exc:
        raise FilesystemError(f"Couldn't set mode of {target}: {exc}", str(target)) from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def execute(
    source_dir: str | Path,
    dest_dir: str | Path,
    bindings: BindingTable,
    *,
    on_file: Optional[FileCallback] = None,
) -> RenderReport:
    """Render every entry of *source_dir* into *dest_dir*.

    Args:
        source_dir: Directory holding the template files.
        dest_dir: Target directory; created when missing.
        bindings: Variable environment for names and contents.
        on_file: Called with the relative path of each kept file once it is
            written.

    Returns:
        A ``RenderReport`` of the created directories, kept files and pruned
        files.

    Raises:
        TemplateRenderError: A name or content template failed.
        FilesystemError: An output entry couldn't be created or replaced.
        InputError: A prompt was aborted while rendering.
    """
    source = Path(source_dir)
    dest = Path(dest_dir)
    if not source.is_dir():
        raise FilesystemError(f"Template directory not found: {source}", str(source))

    renderer = TemplateRenderer(bindings, source)
    report = RenderReport()

    for entry in walk_template(source):
        relative = entry.relative_to(source).as_posix()
        new_name = render_name(renderer, relative)
        target = dest / new_name

        if entry.is_dir():
            logger.debug("Creating directory %s", target)
            _make_directory(target)
            report.directories.append(new_name)
            continue

        if new_name == Path():
            raise TemplateRenderError(
                f"File name {relative!r} rendered to an empty path", relative
            )

        logger.debug("Rendering %s -> %s", relative, target)
        _render_file(renderer, entry, relative, target)

        if prune_if_blank(target):
            report.pruned.append(new_name)
            continue

        report.written.append(new_name)
        if on_file is not None:
            on_file(new_name)

    logger.debug(
        "Rendered %d file(s), pruned %d", len(report.written), len(report.pruned)
    )
    return report
