"""Service manifest — the JSON description of a service consumed by the CLI."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ProviderSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: str = "dev"
    deployment_prefix: str = "serverless"
    deployment_bucket: str = "deployment-bucket"


class PackageSection(BaseModel):
    """Service-wide packaging state; the directory name is written back here."""

    model_config = ConfigDict(frozen=True)

    artifact_directory_name: str | None = None


class FunctionSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    artifact: Path | None = None
    image: str | None = None
    package_disabled: bool = False


class ServiceManifest(BaseModel):
    """Top-level manifest.

    Example::

        {
          "service": "orders",
          "provider": {"stage": "prod", "deployment_prefix": "deploy"},
          "package": {},
          "functions": {"create": {"artifact": "dist/create.zip"}}
        }
    """

    model_config = ConfigDict(frozen=True)

    service: str
    provider: ProviderSection = ProviderSection()
    package: PackageSection = PackageSection()
    functions: dict[str, FunctionSection] = {}
