"""Template metadata record.

Stores where a generated project came from: the template tag, its source
location and when it was created.  The record is written as JSON next to
the output and is never consulted by the renderer itself.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .errors import FilesystemError, SchemaError

METADATA_FILE_NAME = "__metadata.json"


class Metadata(BaseModel):
    """Provenance of a template or of a project generated from it."""

    tag: str = Field(..., description="Template name, e.g. the root directory name")
    repository: str = Field(..., description="Where the template was loaded from")
    created: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation time (UTC)",
    )


def creation_time(path: str | Path) -> datetime:
    """Birth time of *path*, or its modification time where unsupported."""
    stat = os.stat(path)
    timestamp = getattr(stat, "st_birthtime", None) or stat.st_mtime
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def serialize_metadata(
    tag: str,
    repository: str,
    target_dir: str | Path,
    file_name: str = METADATA_FILE_NAME,
) -> Path:
    """Write a fresh metadata record into *target_dir*.

    Returns:
        Path of the written file.
    """
    target = Path(target_dir) / file_name
    record = Metadata(tag=tag, repository=repository)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(record.model_dump_json(indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Couldn't write metadata to {target}: {exc}", str(target)) from exc
    return target


def read_metadata(directory: str | Path, file_name: str = METADATA_FILE_NAME) -> Metadata:
    """Load the metadata record stored in *directory*."""
    source = Path(directory) / file_name
    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Couldn't read metadata from {source}: {exc}", str(source)) from exc
    try:
        return Metadata.model_validate_json(raw)
    except ValidationError as exc:
        raise SchemaError(f"Invalid metadata in {source}: {exc}") from exc
