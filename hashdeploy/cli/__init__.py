"""Hashdeploy CLI — Typer-based command-line interface.

Provides the ``hashdeploy`` command with subcommands for relocating a
single artifact, packaging a service manifest, and uploading the
deployment descriptor under a timestamped key.

All output uses Rich for formatted terminal display.
"""
