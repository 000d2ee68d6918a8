"""Hashdeploy data models — all Pydantic v2, all frozen (immutable)."""

from hashdeploy.models.artifacts import ArtifactRecord
from hashdeploy.models.manifest import (
    FunctionSection,
    PackageSection,
    ProviderSection,
    ServiceManifest,
)
from hashdeploy.models.outcome import HashingOutcome, SkipReason
from hashdeploy.models.targets import BuildTarget, DeploymentBatch, EligibleTarget

__all__ = [
    # targets
    "BuildTarget",
    "DeploymentBatch",
    "EligibleTarget",
    # artifacts
    "ArtifactRecord",
    # outcome
    "HashingOutcome",
    "SkipReason",
    # manifest
    "ServiceManifest",
    "ProviderSection",
    "PackageSection",
    "FunctionSection",
]
