"""Packaging precondition — decides whether hashing is safe for a batch.

Hashing is only safe when every target that needs packaging already has a
materialized artifact.  A target that still relies on the host pipeline's
own packaging step has no known path yet, so the naming decision could not
be made consistently across the whole deployment.
"""

from __future__ import annotations

import logging

from hashdeploy.core.errors import PreconditionError
from hashdeploy.models.targets import DeploymentBatch, EligibleTarget

logger = logging.getLogger(__name__)


class PackagingPrecondition:
    """Scans a batch in order and rejects it on the first ineligible target."""

    def validate(self, batch: DeploymentBatch) -> list[EligibleTarget]:
        """Return the eligible ``(target, artifact_path)`` pairs, in batch order.

        Targets with an external image, or with packaging disabled, are
        skipped.  Any other target without an artifact path rejects the
        whole batch; nothing is relocated.

        Raises
        ------
        PreconditionError
            Naming the first offending target.
        """
        eligible: list[EligibleTarget] = []
        for target in batch:
            if target.has_image:
                logger.debug("Skipping %s: ready-made image", target.name)
                continue
            if target.package_disabled:
                logger.debug("Skipping %s: packaging disabled", target.name)
                continue
            if target.artifact_path is None:
                raise PreconditionError(target.name)
            eligible.append(
                EligibleTarget(target=target, artifact_path=target.artifact_path)
            )
        return eligible
