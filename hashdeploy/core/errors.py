"""Error taxonomy for the hashing feature.

Every ``HashingError`` is recoverable at the plugin level: the feature is
skipped for the run and the surrounding deployment continues with default
naming.  ``OverrideStateError`` signals misuse of a naming override scope
and is not part of that family.
"""

from __future__ import annotations

from pathlib import Path


class HashingError(RuntimeError):
    """Base class for conditions that disable hashing for a run."""


class PreconditionError(HashingError):
    """Raised when a target still requires packaging by the host pipeline."""

    def __init__(self, target_name: str) -> None:
        self.target_name = target_name
        super().__init__(f"Function {target_name} requires packaging by the host pipeline")


class IncompatibleHostError(HashingError):
    """Raised when the naming policy lacks the descriptor-suffix extension point."""


class AlreadyAssignedError(HashingError):
    """Raised when an earlier stage already set the artifact directory name."""

    def __init__(self, existing_name: str) -> None:
        self.existing_name = existing_name
        super().__init__(
            f"Cannot configure artifact directory name, already set to {existing_name}"
        )


class RelocationError(HashingError):
    """Raised when streaming, hashing, or renaming one artifact fails."""

    def __init__(self, source_path: Path, cause: BaseException | None = None) -> None:
        self.source_path = Path(source_path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Cannot relocate {self.source_path}{detail}")


class OverrideStateError(RuntimeError):
    """Raised when a naming override scope is begun twice."""
