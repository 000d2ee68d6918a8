"""Explicit result of a hashing run — applied, or skipped with a reason.

Every failure of the hashing feature is recoverable: the surrounding
deployment continues with default (non-hashed) naming.  Callers inspect
``HashingOutcome.applied`` instead of catching exceptions.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from hashdeploy.models.artifacts import ArtifactRecord


class SkipReason(str, Enum):
    """Why the hashing feature was not applied to this run."""

    ALREADY_ASSIGNED = "already_assigned"
    INCOMPATIBLE_HOST = "incompatible_host"
    PRECONDITION_FAILED = "precondition_failed"
    RELOCATION_FAILED = "relocation_failed"
    HASHING_FAILED = "hashing_failed"


class HashingOutcome(BaseModel):
    """Immutable summary of one ``prepare`` pass."""

    model_config = ConfigDict(frozen=True)

    applied: bool
    skip_reason: SkipReason | None = None
    message: str = ""
    records: list[ArtifactRecord] = []
    artifact_directory_name: str | None = None

    @classmethod
    def success(
        cls, records: list[ArtifactRecord], artifact_directory_name: str
    ) -> HashingOutcome:
        return cls(
            applied=True,
            records=list(records),
            artifact_directory_name=artifact_directory_name,
        )

    @classmethod
    def skipped(cls, reason: SkipReason, message: str) -> HashingOutcome:
        return cls(applied=False, skip_reason=reason, message=message)
