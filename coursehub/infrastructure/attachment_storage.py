"""Post attachment storage (Google Cloud Storage or local directory).

Attachments of a discussion live under one prefix per forum:

    forums/{forum_id}/discussions/{discussion_id}/{post_id}/{filename}

Moving a discussion to another forum therefore moves that prefix.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from google.auth.exceptions import GoogleAuthError
from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError

from coursehub.persistence.models.forum import Discussion
from coursehub.settings import settings

logger = logging.getLogger(__name__)


class AttachmentStorageError(Exception):
    """Custom exception for attachment storage configuration errors."""
    pass


def discussion_prefix(forum_id: int, discussion_id: int) -> str:
    """Storage prefix holding every attachment of a discussion."""
    return f"forums/{forum_id}/discussions/{discussion_id}/"


class AttachmentStorage(ABC):
    """Attachment backend contract."""

    @abstractmethod
    async def relocate(
        self, discussion: Discussion, from_forum_id: int, to_forum_id: int
    ) -> bool:
        """Move a discussion's attachments between forum prefixes.

        Returns:
            False if any attachment could not be moved. Never raises for
            storage errors; callers treat False as a non-fatal warning.
        """


class GCSAttachmentStorage(AttachmentStorage):
    """Attachments stored in a GCS bucket."""

    def __init__(self):
        """Initialize the storage client."""
        self._client: storage.Client | None = None
        self._bucket: storage.Bucket | None = None

    @property
    def client(self) -> storage.Client:
        """Lazy-load the GCS client."""
        if self._client is None:
            self._client = storage.Client(project=settings.gcp_project_id)
        return self._client

    @property
    def bucket(self) -> storage.Bucket:
        """Get the configured bucket."""
        if self._bucket is None:
            bucket_name = settings.gcs_attachments_bucket
            if not bucket_name:
                raise AttachmentStorageError(
                    "GCS_ATTACHMENTS_BUCKET is not configured"
                )
            self._bucket = self.client.bucket(bucket_name)
        return self._bucket

    async def relocate(
        self, discussion: Discussion, from_forum_id: int, to_forum_id: int
    ) -> bool:
        old_prefix = discussion_prefix(from_forum_id, discussion.id)
        new_prefix = discussion_prefix(to_forum_id, discussion.id)

        try:
            bucket = self.bucket
            blobs = list(self.client.list_blobs(bucket, prefix=old_prefix))
        except (AttachmentStorageError, GoogleAuthError, GoogleCloudError) as e:
            logger.error(f"GCS listing failed for discussion {discussion.id}: {e}")
            return False

        ok = True
        for blob in blobs:
            new_name = new_prefix + blob.name[len(old_prefix):]
            try:
                bucket.copy_blob(blob, bucket, new_name)
                blob.delete()
            except GoogleCloudError as e:
                logger.error(f"GCS move failed for {blob.name}: {e}")
                ok = False

        logger.info(
            f"Relocated {len(blobs)} attachment blobs for discussion {discussion.id}: "
            f"forum {from_forum_id} -> {to_forum_id}"
        )
        return ok


class LocalAttachmentStorage(AttachmentStorage):
    """Attachments stored below a local directory."""

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root or settings.attachment_local_root)

    async def relocate(
        self, discussion: Discussion, from_forum_id: int, to_forum_id: int
    ) -> bool:
        source = self.root / discussion_prefix(from_forum_id, discussion.id)
        target = self.root / discussion_prefix(to_forum_id, discussion.id)

        if not source.exists():
            return True

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if not target.exists():
                source.rename(target)
                return True

            ok = True
            for item in source.iterdir():
                destination = target / item.name
                if destination.exists():
                    logger.error(f"Attachment already exists at {destination}")
                    ok = False
                    continue
                shutil.move(str(item), str(destination))
            if ok:
                source.rmdir()
            return ok
        except OSError as e:
            logger.error(f"Attachment move failed for discussion {discussion.id}: {e}")
            return False


def get_attachment_storage() -> AttachmentStorage:
    """Build the attachment backend selected in settings."""
    backend = settings.attachment_storage_backend.lower()
    if backend == "gcs":
        return GCSAttachmentStorage()
    if backend == "local":
        return LocalAttachmentStorage()
    raise AttachmentStorageError(f"Unknown attachment storage backend: {backend}")
