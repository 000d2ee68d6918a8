"""Main Typer application — imports and registers all CLI commands.

Entry point: ``hashdeploy`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from hashdeploy.cli.commands.package import package_cmd
from hashdeploy.cli.commands.relocate import relocate_cmd
from hashdeploy.cli.commands.upload_descriptor import upload_descriptor_cmd
from hashdeploy.config import config

app = typer.Typer(
    name="hashdeploy",
    help="Hashdeploy: content-hashed artifact naming for deployment pipelines.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (defaults to HASHDEPLOY_LOG_LEVEL)."
    ),
) -> None:
    logging.basicConfig(
        level=(log_level or config.log_level).upper(),
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="relocate", help="Move one artifact to its content-hashed name.")(relocate_cmd)
app.command(name="package", help="Hash all artifacts of a service manifest.")(package_cmd)
app.command(
    name="upload-descriptor",
    help="Upload the deployment descriptor under a timestamped key.",
)(upload_descriptor_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
