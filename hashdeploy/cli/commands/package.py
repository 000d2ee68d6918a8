"""``hashdeploy package MANIFEST`` — hash every artifact of a service.

Runs the packaging hook of the hashed artifacts plugin against a JSON
service manifest and writes the updated artifact paths and directory name
back to it.  A skipped run is reported but is not an error.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from hashdeploy.config import config
from hashdeploy.core.plugin import HashedArtifactsPlugin
from hashdeploy.host.service import ManifestService

console = Console()


def package_cmd(
    manifest: Path = typer.Argument(..., help="Path to the service manifest JSON."),
    max_concurrency: int = typer.Option(
        None,
        "--max-concurrency",
        "-j",
        help="Maximum relocations in flight (0 = unbounded).",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Do not write the manifest back."
    ),
) -> None:
    """Relocate artifacts to content-hashed names and pin the directory name."""
    if not manifest.exists():
        console.print(f"[bold red]Manifest not found:[/bold red] {manifest}")
        raise typer.Exit(code=1)

    settings = config
    if max_concurrency is not None:
        settings = config.model_copy(update={"max_concurrent_relocations": max_concurrency})

    service = ManifestService.load(manifest)
    plugin = HashedArtifactsPlugin(service, settings=settings)
    outcome = asyncio.run(plugin.prepare_hashed_artifact_directory_name())

    if not outcome.applied:
        reason = outcome.skip_reason.value if outcome.skip_reason else "unknown"
        console.print(f"[bold yellow]Hashing skipped ({reason}):[/bold yellow] {outcome.message}")
        if plugin.moved_targets and not dry_run:
            # keep the manifest in step with artifacts that were already moved
            service.save()
            console.print(
                f"[dim]Manifest updated for moved artifacts: "
                f"{', '.join(plugin.moved_targets)}[/dim]"
            )
        return

    table = Table(title=f"Hashed artifacts — {service.service_name}")
    table.add_column("Source", style="cyan")
    table.add_column("Relocated", style="green")
    table.add_column("Digest")
    table.add_column("Bytes", justify="right")
    for record in outcome.records:
        table.add_row(
            str(record.source_path),
            record.relocated_path.name,
            record.digest[:12],
            str(record.size_bytes),
        )
    console.print(table)
    console.print(
        f"[bold]Artifact directory:[/bold] {outcome.artifact_directory_name}"
    )

    if not dry_run:
        service.save()
        console.print(f"[dim]Manifest updated: {manifest}[/dim]")
