"""Naming policies — artifact directory names and the descriptor suffix.

``ProviderNaming`` carries a replaceable strategy slot,
``descriptor_suffix``, that decides where the deployment descriptor is
stored.  ``NamingOverrideScope`` swaps that strategy for the duration of a
single operation and always puts the captured original back, so a
rollback tool can find the descriptor under its usual name as well as
under a timestamped one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from hashdeploy.core.errors import (
    AlreadyAssignedError,
    IncompatibleHostError,
    OverrideStateError,
)

logger = logging.getLogger(__name__)

DESCRIPTOR_SUFFIX_SLOT = "descriptor_suffix"

SuffixStrategy = Callable[[], str]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Provider naming
# ---------------------------------------------------------------------------

class ProviderNaming:
    """Naming decisions of the deployment provider.

    The ``descriptor_suffix`` attribute is the extension point: it holds a
    zero-argument callable returning the descriptor's key suffix.  Consumers
    call :meth:`get_descriptor_suffix`, never the slot directly.
    """

    def __init__(
        self, descriptor_file_name: str = "compiled-cloudformation-template.json"
    ) -> None:
        self.descriptor_file_name = descriptor_file_name
        self.descriptor_suffix: SuffixStrategy = self._default_descriptor_suffix

    def _default_descriptor_suffix(self) -> str:
        return self.descriptor_file_name

    def get_descriptor_suffix(self) -> str:
        return self.descriptor_suffix()


def supports_descriptor_override(naming: Any) -> bool:
    """Whether ``naming`` exposes a callable descriptor-suffix slot."""
    return callable(getattr(naming, DESCRIPTOR_SUFFIX_SLOT, None))


# ---------------------------------------------------------------------------
# Directory naming
# ---------------------------------------------------------------------------

class DirectoryNamingPolicy:
    """Derives the hash-addressed artifact directory name.

    Only called once every eligible artifact has been relocated.
    """

    @staticmethod
    def compute_name(prefix: str, service_name: str, stage: str) -> str:
        return f"{prefix}/{service_name}/{stage}"

    def assign(
        self,
        existing: str | None,
        prefix: str,
        service_name: str,
        stage: str,
    ) -> str:
        """Return the new directory name unless one is already assigned.

        Raises
        ------
        AlreadyAssignedError
            If ``existing`` is set; it is never overwritten.
        """
        if existing:
            raise AlreadyAssignedError(existing)
        return self.compute_name(prefix, service_name, stage)


# ---------------------------------------------------------------------------
# Override scope
# ---------------------------------------------------------------------------

class OverrideState(str, Enum):
    UNINSTALLED = "uninstalled"
    ACTIVE = "active"
    RESTORED = "restored"


def timestamp_prefix(moment: datetime) -> str:
    """``<epochMillis>-<ISO-8601 UTC with milliseconds and Z>``."""
    moment = moment.astimezone(timezone.utc)
    epoch_ms = (moment - _EPOCH) // timedelta(milliseconds=1)
    iso = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"{epoch_ms}-{iso}"


class NamingOverrideScope:
    """Scoped, guaranteed-reversible substitution of the descriptor suffix.

    One instance brackets one operation.  ``begin()`` captures the current
    strategy, installs one that prefixes a time bucket to whatever the
    original returns, and hands back a ``restore`` callback.  The scope is
    not reentrant: ``begin()`` on an active or restored scope raises
    ``OverrideStateError``.  Prefer the context-manager form, which
    restores on every exit path::

        with NamingOverrideScope(provider.naming):
            uploader.upload_descriptor(...)

    Parameters
    ----------
    naming:
        Object exposing the ``descriptor_suffix`` slot.
    clock:
        Returns the current time; the time bucket is fixed at ``begin()``.
    """

    def __init__(
        self,
        naming: Any,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._naming = naming
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._original: SuffixStrategy | None = None
        self.state = OverrideState.UNINSTALLED
        self.prefix: str | None = None

    def begin(self) -> Callable[[], None]:
        if self.state is not OverrideState.UNINSTALLED:
            raise OverrideStateError(
                f"Naming override already {self.state.value}; scopes are single-use"
            )
        if not supports_descriptor_override(self._naming):
            raise IncompatibleHostError("Incompatible version of the provider naming")

        original: SuffixStrategy = getattr(self._naming, DESCRIPTOR_SUFFIX_SLOT)
        prefix = timestamp_prefix(self._clock())

        def _timestamped_suffix() -> str:
            return f"{prefix}/{original()}"

        self._original = original
        self.prefix = prefix
        setattr(self._naming, DESCRIPTOR_SUFFIX_SLOT, _timestamped_suffix)
        self.state = OverrideState.ACTIVE
        logger.debug("Descriptor suffix overridden with prefix %s", prefix)
        return self.restore

    def restore(self) -> None:
        """Reinstate the captured strategy.  Later calls are no-ops."""
        if self.state is not OverrideState.ACTIVE:
            return
        setattr(self._naming, DESCRIPTOR_SUFFIX_SLOT, self._original)
        self.state = OverrideState.RESTORED
        logger.debug("Descriptor suffix restored")

    def __enter__(self) -> NamingOverrideScope:
        self.begin()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.restore()
