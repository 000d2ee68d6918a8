"""``hashdeploy relocate PATH`` — move one artifact to its content-hashed name."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from hashdeploy.config import config
from hashdeploy.core.errors import RelocationError
from hashdeploy.core.relocator import ArtifactRelocator

console = Console()


def relocate_cmd(
    path: Path = typer.Argument(..., help="Artifact to relocate."),
    output_dir: Path = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the hashed file (defaults to the artifact's own).",
    ),
    algorithm: str = typer.Option(
        None,
        "--algorithm",
        help="Hash algorithm (defaults to HASHDEPLOY_HASH_ALGORITHM).",
    ),
) -> None:
    """Stream, hash, and rename a single artifact."""
    relocator = ArtifactRelocator(
        chunk_size=config.chunk_size,
        cleanup_partial_files=config.cleanup_partial_files,
    )
    try:
        record = asyncio.run(
            relocator.relocate(path, output_dir, algorithm or config.hash_algorithm)
        )
    except RelocationError as exc:
        console.print(f"[bold red]Relocation failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    console.print(f"[green]Moved[/green] {record.source_path} -> {record.relocated_path}")
    console.print(f"[dim]{record.algorithm}:{record.digest}[/dim]")
