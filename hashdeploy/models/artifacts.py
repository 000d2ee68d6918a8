"""Relocated artifact records (immutable once produced)."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ArtifactRecord(BaseModel):
    """The result of moving one artifact to its content-addressed path.

    ``relocated_path`` is ``<basename>-<digest><ext>`` inside the output
    directory, so identical bytes always yield the identical filename.
    """

    model_config = ConfigDict(frozen=True)

    source_path: Path
    digest: str  # lowercase hex
    algorithm: str = "sha1"
    relocated_path: Path
    size_bytes: int = 0
