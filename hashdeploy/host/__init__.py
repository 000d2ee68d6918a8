"""Host-side collaborators: manifest-backed service and a local bucket uploader."""

from hashdeploy.host.service import LoggingCliLog, ManifestService
from hashdeploy.host.uploader import LocalBucketUploader, UploadResult

__all__ = ["LoggingCliLog", "ManifestService", "LocalBucketUploader", "UploadResult"]
