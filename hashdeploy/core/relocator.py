"""Artifact relocation — move build outputs to content-hash-addressed paths.

A source file is streamed once: each chunk updates the digest and is
written to ``<output_dir>/<basename>.tmp``.  At end of stream the temp file
is atomically renamed to ``<output_dir>/<basename>-<digest><ext>`` and the
source is removed.  Identical bytes always land on the identical path, so
re-running a relocation (or relocating an equal artifact from another
batch) simply overwrites the same file.  A source whose name already ends in
its own digest keeps that name, so re-running after a partial failure
converges instead of hashing twice.

Blocking file I/O runs in worker threads via ``asyncio.to_thread`` so many
relocations can be in flight from a single event loop.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path

from hashdeploy.core.errors import RelocationError
from hashdeploy.core.hasher import (
    DEFAULT_ALGORITHM,
    DEFAULT_CHUNK_SIZE,
    hashed_filename,
    new_hasher,
)
from hashdeploy.models.artifacts import ArtifactRecord
from hashdeploy.models.targets import EligibleTarget

logger = logging.getLogger(__name__)


class ArtifactRelocator:
    """Streams, hashes, and renames artifacts.

    Parameters
    ----------
    chunk_size:
        Bytes read per iteration of the copy loop.
    cleanup_partial_files:
        Remove the ``.tmp`` file when a relocation fails.  When False the
        partial file is left behind for inspection.
    """

    def __init__(
        self,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        cleanup_partial_files: bool = True,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.cleanup_partial_files = cleanup_partial_files

    # ------------------------------------------------------------------
    # Single artifact
    # ------------------------------------------------------------------

    async def relocate(
        self,
        source_path: Path,
        output_dir: Path | None = None,
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> ArtifactRecord:
        """Move ``source_path`` to its digest-qualified path.

        ``output_dir`` defaults to the source's own directory.

        Raises
        ------
        RelocationError
            On an unknown algorithm or any I/O failure.
        """
        return await asyncio.to_thread(
            self.relocate_sync, source_path, output_dir, algorithm
        )

    def relocate_sync(
        self,
        source_path: Path,
        output_dir: Path | None = None,
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> ArtifactRecord:
        """Blocking implementation of :meth:`relocate`."""
        source = Path(source_path)
        out_dir = Path(output_dir) if output_dir is not None else source.parent

        try:
            hasher = new_hasher(algorithm)
        except ValueError as exc:
            raise RelocationError(source, exc) from exc

        tmp_path = self.temp_path_for(source, out_dir)
        size = 0
        try:
            with open(source, "rb") as src, open(tmp_path, "wb") as tmp:
                while chunk := src.read(self.chunk_size):
                    hasher.update(chunk)
                    tmp.write(chunk)
                    size += len(chunk)
            digest = hasher.hexdigest()
            if source.stem.endswith(f"-{digest}"):
                # already content-addressed by an earlier run
                final_path = out_dir / source.name
            else:
                final_path = out_dir / hashed_filename(source, digest)
            os.replace(tmp_path, final_path)
        except OSError as exc:
            self._discard_partial(tmp_path)
            raise RelocationError(source, exc) from exc

        if source.resolve() != final_path.resolve():
            try:
                source.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                raise RelocationError(source, exc) from exc

        logger.debug("Relocated %s -> %s (%s)", source, final_path, digest)
        return ArtifactRecord(
            source_path=source,
            digest=digest,
            algorithm=algorithm,
            relocated_path=final_path,
            size_bytes=size,
        )

    @staticmethod
    def temp_path_for(source: Path, output_dir: Path) -> Path:
        """``<output_dir>/<basename>.tmp``, never the source itself."""
        source = Path(source)
        tmp_path = Path(output_dir) / f"{source.stem}.tmp"
        if tmp_path.resolve() == source.resolve():
            # a source already named *.tmp must not be truncated by its own copy
            tmp_path = Path(output_dir) / f"{source.name}.tmp"
        return tmp_path

    def _discard_partial(self, tmp_path: Path) -> None:
        if not self.cleanup_partial_files:
            logger.warning("Leaving partial file %s behind", tmp_path)
            return
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Cannot remove partial file %s: %s", tmp_path, exc)

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    async def relocate_all(
        self,
        eligible: Sequence[EligibleTarget],
        *,
        algorithm: str = DEFAULT_ALGORITHM,
        max_concurrency: int = 0,
        on_relocated: Callable[[EligibleTarget, ArtifactRecord], None] | None = None,
    ) -> list[ArtifactRecord]:
        """Relocate every eligible target concurrently.

        Targets sharing one artifact file are relocated once and all receive
        the same record.  Sources whose temp paths collide (``handler.zip``
        and ``handler.jar``) run one after the other.  Records are returned
        in the order of ``eligible``.

        Every relocation runs to completion before the first failure is
        raised; finished relocations are not undone.  ``on_relocated`` is
        called once per target as its artifact lands, so callers can track
        on-disk state even when the batch fails.  ``max_concurrency`` of 0
        means unbounded.
        """
        if max_concurrency < 0:
            raise ValueError("max_concurrency must be >= 0")

        groups: dict[Path, list[EligibleTarget]] = {}
        for item in eligible:
            groups.setdefault(Path(item.artifact_path).resolve(), []).append(item)

        semaphore = asyncio.Semaphore(max_concurrency or max(len(groups), 1))
        temp_locks: dict[Path, asyncio.Lock] = {}

        async def _one(source: Path, items: list[EligibleTarget]) -> ArtifactRecord:
            lock = temp_locks.setdefault(
                self.temp_path_for(source, source.parent).resolve(), asyncio.Lock()
            )
            async with lock, semaphore:
                record = await self.relocate(items[0].artifact_path, algorithm=algorithm)
            if on_relocated is not None:
                for item in items:
                    on_relocated(item, record)
            return record

        sources = list(groups)
        results = await asyncio.gather(
            *(_one(source, groups[source]) for source in sources),
            return_exceptions=True,
        )

        by_source: dict[Path, ArtifactRecord] = {}
        for source, result in zip(sources, results):
            if isinstance(result, BaseException):
                raise result
            by_source[source] = result
        return [by_source[Path(item.artifact_path).resolve()] for item in eligible]
