"""Removes generated files that rendered to nothing but whitespace."""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_NON_WHITESPACE = re.compile(rb"\S")


def is_only_whitespace(data: bytes) -> bool:
    """Return ``True`` for empty or whitespace-only content."""
    return _NON_WHITESPACE.search(data) is None


def prune_if_blank(path: str | Path) -> bool:
    """Delete *path* if its content is empty or whitespace only.

    Best effort: a file that cannot be read or removed is logged and left in
    place.

    Returns:
        ``True`` if the file was deleted.
    """
    file_path = Path(path)
    try:
        contents = file_path.read_bytes()
    except OSError as exc:
        logger.warning("Couldn't read the contents of %s: %s", file_path, exc)
        return False

    if not is_only_whitespace(contents):
        return False

    try:
        file_path.unlink()
    except OSError as exc:
        logger.warning("Couldn't remove blank file %s: %s", file_path, exc)
        return False

    logger.debug("Pruned blank file %s", file_path)
    return True
