"""Digest helpers for content addressing."""

from __future__ import annotations

import hashlib
from pathlib import Path

DEFAULT_ALGORITHM = "sha1"
DEFAULT_CHUNK_SIZE = 64 * 1024


def new_hasher(algorithm: str = DEFAULT_ALGORITHM) -> "hashlib._Hash":
    """Return a fresh hash accumulator, raising ``ValueError`` for unknown names."""
    return hashlib.new(algorithm)


def hashed_filename(path: Path, digest: str) -> str:
    """``<basename>-<digest><ext>`` where ``ext`` is the last suffix only.

    ``handler.zip`` -> ``handler-<digest>.zip``; ``bundle.tar.gz`` ->
    ``bundle.tar-<digest>.gz``; dotfiles such as ``.env`` have no extension.
    """
    path = Path(path)
    return f"{path.stem}-{digest}{path.suffix}"
