"""Manifest-backed host service — the registry and provider collaborators.

The real deployment host owns function definitions, stage/prefix/bucket
resolution, and lifecycle dispatch.  ``ManifestService`` provides the same
surface over a JSON ``ServiceManifest`` so the hashing plugin can run from
the CLI and in tests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from hashdeploy.core.naming import ProviderNaming
from hashdeploy.models.manifest import (
    FunctionSection,
    PackageSection,
    ServiceManifest,
)
from hashdeploy.models.targets import BuildTarget

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------

class TargetRegistry(Protocol):
    """Function registry: list, fetch, and write back targets."""

    service_name: str

    def list_target_names(self) -> list[str]: ...

    def get_target(self, name: str) -> BuildTarget: ...

    def replace_target(self, target: BuildTarget) -> None: ...

    def get_artifact_directory_name(self) -> str | None: ...

    def set_artifact_directory_name(self, name: str) -> None: ...


class Provider(Protocol):
    """Deployment provider: stage, prefix, bucket, and naming policy."""

    naming: object

    def get_stage(self) -> str: ...

    def get_deployment_prefix(self) -> str: ...

    async def get_deployment_bucket_name(self) -> str: ...


class CliLog(Protocol):
    """Host diagnostics channel for non-fatal messages."""

    def log(self, message: str) -> None: ...


class LoggingCliLog:
    """``CliLog`` that forwards to the standard logging module.

    With ``keep_messages`` the lines are also collected in ``messages``.
    """

    def __init__(self, name: str = "hashdeploy", *, keep_messages: bool = False) -> None:
        self._logger = logging.getLogger(name)
        self._keep = keep_messages
        self.messages: list[str] = []

    def log(self, message: str) -> None:
        if self._keep:
            self.messages.append(message)
        self._logger.info(message)


# ---------------------------------------------------------------------------
# Manifest-backed implementation
# ---------------------------------------------------------------------------

class ManifestService:
    """Registry + provider over a ``ServiceManifest``.

    Relative artifact paths are resolved against ``base_dir`` (the manifest's
    directory when loaded from a file).

    Parameters
    ----------
    manifest:
        The parsed manifest.
    base_dir:
        Directory that relative artifact paths are relative to.
    naming:
        Provider naming policy; a default ``ProviderNaming`` if omitted.
    """

    def __init__(
        self,
        manifest: ServiceManifest,
        base_dir: Path | None = None,
        *,
        naming: ProviderNaming | None = None,
        source_path: Path | None = None,
    ) -> None:
        self._manifest = manifest
        self._base = Path(base_dir) if base_dir is not None else Path.cwd()
        self._source_path = source_path
        self.naming = naming or ProviderNaming()

    @classmethod
    def load(cls, path: Path, *, naming: ProviderNaming | None = None) -> ManifestService:
        path = Path(path)
        manifest = ServiceManifest.model_validate_json(path.read_text(encoding="utf-8"))
        return cls(manifest, path.parent, naming=naming, source_path=path)

    def save(self, path: Path | None = None) -> Path:
        """Write the (possibly updated) manifest back as JSON."""
        target = Path(path) if path is not None else self._source_path
        if target is None:
            raise ValueError("No path to save the manifest to")
        target.write_text(
            self._manifest.model_dump_json(indent=2, exclude_none=True),
            encoding="utf-8",
        )
        return target

    @property
    def manifest(self) -> ServiceManifest:
        return self._manifest

    # -- registry -----------------------------------------------------

    @property
    def service_name(self) -> str:
        return self._manifest.service

    def list_target_names(self) -> list[str]:
        return list(self._manifest.functions)

    def get_target(self, name: str) -> BuildTarget:
        try:
            section = self._manifest.functions[name]
        except KeyError:
            raise KeyError(f"Unknown function: {name}") from None
        artifact = section.artifact
        if artifact is not None and not artifact.is_absolute():
            artifact = self._base / artifact
        return BuildTarget(
            name=name,
            artifact_path=artifact,
            image=section.image,
            package_disabled=section.package_disabled,
        )

    def replace_target(self, target: BuildTarget) -> None:
        if target.name not in self._manifest.functions:
            raise KeyError(f"Unknown function: {target.name}")
        functions = dict(self._manifest.functions)
        functions[target.name] = FunctionSection(
            artifact=self._relative(target.artifact_path),
            image=target.image,
            package_disabled=target.package_disabled,
        )
        self._manifest = self._manifest.model_copy(update={"functions": functions})

    def _relative(self, path: Path | None) -> Path | None:
        if path is None:
            return None
        try:
            return Path(path).relative_to(self._base)
        except ValueError:
            return Path(path)

    def get_artifact_directory_name(self) -> str | None:
        return self._manifest.package.artifact_directory_name

    def set_artifact_directory_name(self, name: str) -> None:
        self._manifest = self._manifest.model_copy(
            update={"package": PackageSection(artifact_directory_name=name)}
        )

    # -- provider -----------------------------------------------------

    def get_stage(self) -> str:
        return self._manifest.provider.stage

    def get_deployment_prefix(self) -> str:
        return self._manifest.provider.deployment_prefix

    async def get_deployment_bucket_name(self) -> str:
        return self._manifest.provider.deployment_bucket
