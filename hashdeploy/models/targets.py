"""Build target models — the units the packaging precondition inspects."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class BuildTarget(BaseModel):
    """A single deployable function as declared by the host service.

    A target is eligible for hash-based relocation when it is neither an
    externally supplied image nor explicitly excluded from packaging, and
    it already points at a materialized artifact.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    artifact_path: Path | None = None
    image: str | None = None
    package_disabled: bool = False

    @property
    def has_image(self) -> bool:
        return bool(self.image)


class DeploymentBatch(BaseModel):
    """Ordered collection of targets, judged as a single all-or-nothing unit."""

    model_config = ConfigDict(frozen=True)

    targets: list[BuildTarget] = []

    def __iter__(self) -> Iterator[BuildTarget]:  # type: ignore[override]
        return iter(self.targets)

    def __len__(self) -> int:
        return len(self.targets)

    def names(self) -> list[str]:
        return [t.name for t in self.targets]


class EligibleTarget(BaseModel):
    """A target that passed the precondition, paired with its artifact path."""

    model_config = ConfigDict(frozen=True)

    target: BuildTarget
    artifact_path: Path
