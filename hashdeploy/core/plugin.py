"""Hashed artifacts plugin — wires the core into host lifecycle hooks.

After the host has created its deployment artifacts, the plugin checks
that every function ships a ready-made artifact, moves each artifact to a
content-hashed filename, and pins the artifact directory name to
``<prefix>/<service>/<stage>``.  Unchanged artifacts then keep their names
across deploys and the upload step skips them.

Because the directory no longer changes per deploy, the deployment
descriptor would be overwritten in place, and rollback tooling looks for
it under timestamped keys.  After the artifact upload the plugin uploads
the descriptor once more inside a ``NamingOverrideScope`` so it is also
stored under a timestamped suffix.

Every ``HashingError`` is turned into a skipped ``HashingOutcome`` plus a
diagnostic line; the surrounding deployment carries on with default
naming.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from hashdeploy.config import HashdeploySettings
from hashdeploy.core.errors import (
    AlreadyAssignedError,
    HashingError,
    IncompatibleHostError,
    PreconditionError,
    RelocationError,
)
from hashdeploy.core.naming import (
    DirectoryNamingPolicy,
    NamingOverrideScope,
    supports_descriptor_override,
)
from hashdeploy.core.precondition import PackagingPrecondition
from hashdeploy.core.relocator import ArtifactRelocator
from hashdeploy.host.service import CliLog, LoggingCliLog
from hashdeploy.host.uploader import UploadResult, Uploader
from hashdeploy.models.artifacts import ArtifactRecord
from hashdeploy.models.outcome import HashingOutcome, SkipReason
from hashdeploy.models.targets import DeploymentBatch, EligibleTarget

logger = logging.getLogger(__name__)

PACKAGE_HOOK = "after:package:createDeploymentArtifacts"
UPLOAD_HOOK = "after:deploy:uploadArtifacts"

_SKIP_REASONS: list[tuple[type[HashingError], SkipReason]] = [
    (AlreadyAssignedError, SkipReason.ALREADY_ASSIGNED),
    (IncompatibleHostError, SkipReason.INCOMPATIBLE_HOST),
    (PreconditionError, SkipReason.PRECONDITION_FAILED),
    (RelocationError, SkipReason.RELOCATION_FAILED),
]


def skip_reason_for(err: HashingError) -> SkipReason:
    for exc_type, reason in _SKIP_REASONS:
        if isinstance(err, exc_type):
            return reason
    return SkipReason.HASHING_FAILED


class HashedArtifactsPlugin:
    """Content-hashed artifact naming for one service deployment.

    Parameters
    ----------
    service:
        Registry and provider collaborator (see ``host.service``).
    cli_log:
        Diagnostics channel; defaults to ``LoggingCliLog``.
    uploader:
        Upload collaborator used for the descriptor re-upload.
    descriptor_path:
        Local path of the generated deployment descriptor.
    settings:
        Runtime settings; a fresh ``HashdeploySettings`` if omitted.
    clock:
        Time source for the descriptor's timestamped suffix.
    """

    def __init__(
        self,
        service: Any,
        *,
        cli_log: CliLog | None = None,
        uploader: Uploader | None = None,
        descriptor_path: Path | None = None,
        settings: HashdeploySettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.service = service
        self.cli_log = cli_log or LoggingCliLog()
        self.uploader = uploader
        self.descriptor_path = descriptor_path
        self.settings = settings or HashdeploySettings()
        self._clock = clock

        self.precondition = PackagingPrecondition()
        self.relocator = ArtifactRelocator(
            chunk_size=self.settings.chunk_size,
            cleanup_partial_files=self.settings.cleanup_partial_files,
        )
        self.directory_naming = DirectoryNamingPolicy()

        self.bucket_name: str | None = None
        self.outcome: HashingOutcome | None = None
        self.moved_targets: list[str] = []
        self._persistent_scope: NamingOverrideScope | None = None

        self.hooks: dict[str, Callable[[], Awaitable[Any]]] = {
            PACKAGE_HOOK: self.prepare_hashed_artifact_directory_name,
            UPLOAD_HOOK: self.upload_descriptor_with_timestamped_suffix,
        }

    async def run_hook(self, event: str) -> Any:
        """Dispatch one lifecycle event; unknown events are ignored."""
        handler = self.hooks.get(event)
        if handler is None:
            logger.debug("No handler for %s", event)
            return None
        return await handler()

    # ------------------------------------------------------------------
    # Packaging
    # ------------------------------------------------------------------

    async def prepare_hashed_artifact_directory_name(self) -> HashingOutcome:
        """Relocate all artifacts and pin the artifact directory name."""
        try:
            outcome = await self._prepare()
        except HashingError as err:
            message = f"Cannot use hashing for artifact directory name: {err}"
            if isinstance(err, (AlreadyAssignedError, IncompatibleHostError)):
                message = str(err)
            self.cli_log.log(message)
            outcome = HashingOutcome.skipped(skip_reason_for(err), message)
        self.outcome = outcome
        return outcome

    async def _prepare(self) -> HashingOutcome:
        existing = self.service.get_artifact_directory_name()
        if existing:
            raise AlreadyAssignedError(existing)

        if not supports_descriptor_override(self.service.naming):
            raise IncompatibleHostError("Incompatible version of the provider")

        batch = DeploymentBatch(
            targets=[self.service.get_target(n) for n in self.service.list_target_names()]
        )
        eligible = self.precondition.validate(batch)

        records: list[ArtifactRecord] = await self.relocator.relocate_all(
            eligible,
            algorithm=self.settings.hash_algorithm,
            max_concurrency=self.settings.max_concurrent_relocations,
            on_relocated=self._record_move,
        )

        directory_name = self.directory_naming.assign(
            self.service.get_artifact_directory_name(),
            self.service.get_deployment_prefix(),
            self.service.service_name,
            self.service.get_stage(),
        )
        self.cli_log.log(f"Setting artifact directory name to {directory_name}")
        self.service.set_artifact_directory_name(directory_name)

        if self.settings.reconfigure_descriptor_suffix:
            # Lives for the rest of the run; see restore_descriptor_suffix().
            self._persistent_scope = NamingOverrideScope(
                self.service.naming, clock=self._clock
            )
            self._persistent_scope.begin()
        else:
            self.cli_log.log(
                "Cannot reconfigure the path to the compiled template, "
                "the descriptor is re-uploaded under a timestamped key after deploy"
            )

        return HashingOutcome.success(records, directory_name)

    def _record_move(self, item: EligibleTarget, record: ArtifactRecord) -> None:
        self.moved_targets.append(item.target.name)
        self.cli_log.log(f"Moved {record.source_path} to {record.relocated_path}")
        self.service.replace_target(
            item.target.model_copy(update={"artifact_path": record.relocated_path})
        )

    def restore_descriptor_suffix(self) -> None:
        """Undo a run-wide descriptor override installed during packaging."""
        if self._persistent_scope is not None:
            self._persistent_scope.restore()
            self._persistent_scope = None

    # ------------------------------------------------------------------
    # Descriptor upload
    # ------------------------------------------------------------------

    async def upload_descriptor_with_timestamped_suffix(self) -> UploadResult | None:
        """Upload the descriptor again under a timestamped suffix.

        The naming override is restored whether or not the upload succeeds.
        """
        if self.settings.reconfigure_descriptor_suffix:
            return None
        if self.uploader is None or self.descriptor_path is None:
            self.cli_log.log("No descriptor upload configured, skipping timestamped copy")
            return None

        directory_name = self.service.get_artifact_directory_name()
        if not directory_name:
            self.cli_log.log("No artifact directory name set, skipping timestamped copy")
            return None
        if not supports_descriptor_override(self.service.naming):
            self.cli_log.log("Incompatible version of the provider, skipping timestamped copy")
            return None

        self.bucket_name = await self.service.get_deployment_bucket_name()

        scope = NamingOverrideScope(self.service.naming, clock=self._clock)
        restore = scope.begin()
        try:
            result = self.uploader.upload_descriptor(
                self.bucket_name, directory_name, self.service.naming, self.descriptor_path
            )
        finally:
            restore()
        self.cli_log.log(f"Uploaded descriptor copy to {result.key}")
        return result
