"""``hashdeploy upload-descriptor MANIFEST DESCRIPTOR`` — timestamped descriptor copy.

Uploads the deployment descriptor into a local bucket directory under
``<artifact directory>/<epochMillis>-<ISO-8601>/<descriptor name>``, with
the provider naming restored afterwards.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from hashdeploy.config import config
from hashdeploy.core.naming import ProviderNaming
from hashdeploy.core.plugin import HashedArtifactsPlugin
from hashdeploy.host.service import ManifestService
from hashdeploy.host.uploader import LocalBucketUploader

console = Console()


def upload_descriptor_cmd(
    manifest: Path = typer.Argument(..., help="Path to the service manifest JSON."),
    descriptor: Path = typer.Argument(..., help="Path to the deployment descriptor."),
    bucket_root: Path = typer.Option(
        Path(".hashdeploy/buckets"),
        "--bucket-root",
        "-b",
        help="Local directory standing in for the deployment bucket store.",
    ),
) -> None:
    """Upload the descriptor once more under a timestamped suffix."""
    for path in (manifest, descriptor):
        if not path.exists():
            console.print(f"[bold red]Not found:[/bold red] {path}")
            raise typer.Exit(code=1)

    service = ManifestService.load(
        manifest, naming=ProviderNaming(descriptor.name)
    )
    plugin = HashedArtifactsPlugin(
        service,
        uploader=LocalBucketUploader(bucket_root),
        descriptor_path=descriptor,
        settings=config.model_copy(update={"reconfigure_descriptor_suffix": False}),
    )
    try:
        result = asyncio.run(plugin.upload_descriptor_with_timestamped_suffix())
    except OSError as exc:
        console.print(f"[bold red]Upload failed:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if result is None:
        console.print("[bold yellow]Nothing uploaded.[/bold yellow]")
        return
    console.print(f"[green]Uploaded[/green] {result.key} to bucket {plugin.bucket_name}")
