"""Hashdeploy: content-hashed artifact naming for deployment pipelines.

Build artifacts are moved to ``<basename>-<digest><ext>`` before upload, so
unchanged artifacts keep identical names across deploys and are skipped by
the upload step.  The artifact directory is pinned to
``<prefix>/<service>/<stage>``, and the deployment descriptor is also
uploaded under a timestamped key so rollback tooling can still find it.
"""

__version__ = "0.1.0"
__description__ = "Content-hashed artifact naming for deployment pipelines"

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
    ProviderNaming,
)
from hashdeploy.core.plugin import HashedArtifactsPlugin
from hashdeploy.core.precondition import PackagingPrecondition
from hashdeploy.core.relocator import ArtifactRelocator

__all__ = [
    "ArtifactRelocator",
    "PackagingPrecondition",
    "DirectoryNamingPolicy",
    "NamingOverrideScope",
    "ProviderNaming",
    "HashedArtifactsPlugin",
    "HashingError",
    "PreconditionError",
    "IncompatibleHostError",
    "AlreadyAssignedError",
    "RelocationError",
    "__version__",
]
