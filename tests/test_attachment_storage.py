"""Tests for attachment relocation backends."""

from unittest.mock import MagicMock

import pytest
from google.auth.exceptions import DefaultCredentialsError
from google.cloud.exceptions import GoogleCloudError

from coursehub.infrastructure.attachment_storage import (
    AttachmentStorageError,
    GCSAttachmentStorage,
    LocalAttachmentStorage,
    discussion_prefix,
    get_attachment_storage,
)
from coursehub.persistence.models.forum import Discussion


@pytest.fixture
def discussion():
    return Discussion(id=5, course_id=1, forum_id=1, name="Photosynthesis question")


def _write(root, forum_id, discussion_id, relative, content="data"):
    path = root / discussion_prefix(forum_id, discussion_id) / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def test_discussion_prefix():
    assert discussion_prefix(3, 17) == "forums/3/discussions/17/"


class TestLocalAttachmentStorage:
    """Tests for the local directory backend."""

    @pytest.mark.asyncio
    async def test_moves_directory(self, tmp_path, discussion):
        _write(tmp_path, 1, 5, "10/diagram.png")
        storage = LocalAttachmentStorage(tmp_path)

        assert await storage.relocate(discussion, 1, 2) is True

        assert (tmp_path / "forums/2/discussions/5/10/diagram.png").read_text() == "data"
        assert not (tmp_path / "forums/1/discussions/5").exists()

    @pytest.mark.asyncio
    async def test_nothing_to_move(self, tmp_path, discussion):
        storage = LocalAttachmentStorage(tmp_path)
        assert await storage.relocate(discussion, 1, 2) is True

    @pytest.mark.asyncio
    async def test_merges_into_existing_directory(self, tmp_path, discussion):
        _write(tmp_path, 1, 5, "10/diagram.png")
        _write(tmp_path, 2, 5, "11/notes.txt")
        storage = LocalAttachmentStorage(tmp_path)

        assert await storage.relocate(discussion, 1, 2) is True

        assert (tmp_path / "forums/2/discussions/5/10/diagram.png").exists()
        assert (tmp_path / "forums/2/discussions/5/11/notes.txt").exists()

    @pytest.mark.asyncio
    async def test_collision_reports_failure(self, tmp_path, discussion):
        _write(tmp_path, 1, 5, "10/diagram.png", content="new")
        _write(tmp_path, 2, 5, "10/diagram.png", content="old")
        storage = LocalAttachmentStorage(tmp_path)

        assert await storage.relocate(discussion, 1, 2) is False

        # Nothing is overwritten
        assert (tmp_path / "forums/2/discussions/5/10/diagram.png").read_text() == "old"
        assert (tmp_path / "forums/1/discussions/5/10/diagram.png").read_text() == "new"


class TestGCSAttachmentStorage:
    """Tests for the GCS backend with a mocked client."""

    def _storage(self, blob_names):
        storage = GCSAttachmentStorage()
        storage._client = MagicMock()
        storage._bucket = MagicMock()
        blobs = []
        for name in blob_names:
            blob = MagicMock()
            blob.name = name
            blobs.append(blob)
        storage._client.list_blobs.return_value = blobs
        return storage, blobs

    @pytest.mark.asyncio
    async def test_copies_then_deletes(self, discussion):
        storage, blobs = self._storage(
            ["forums/1/discussions/5/10/a.png", "forums/1/discussions/5/11/b.pdf"]
        )

        assert await storage.relocate(discussion, 1, 2) is True

        storage._client.list_blobs.assert_called_once_with(
            storage._bucket, prefix="forums/1/discussions/5/"
        )
        copied = [call.args[2] for call in storage._bucket.copy_blob.call_args_list]
        assert copied == ["forums/2/discussions/5/10/a.png", "forums/2/discussions/5/11/b.pdf"]
        for blob in blobs:
            blob.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_partial_failure(self, discussion):
        storage, blobs = self._storage(
            ["forums/1/discussions/5/10/a.png", "forums/1/discussions/5/11/b.pdf"]
        )
        storage._bucket.copy_blob.side_effect = [GoogleCloudError("denied"), None]

        assert await storage.relocate(discussion, 1, 2) is False

        blobs[0].delete.assert_not_called()
        blobs[1].delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_listing_failure(self, discussion):
        storage, _ = self._storage([])
        storage._client.list_blobs.side_effect = GoogleCloudError("unavailable")

        assert await storage.relocate(discussion, 1, 2) is False

    def test_bucket_required(self, monkeypatch):
        from coursehub.infrastructure import attachment_storage

        monkeypatch.setattr(attachment_storage.settings, "gcs_attachments_bucket", None)
        storage = GCSAttachmentStorage()
        storage._client = MagicMock()

        with pytest.raises(AttachmentStorageError):
            storage.bucket

    @pytest.mark.asyncio
    async def test_unconfigured_bucket_reports_failure(self, monkeypatch, discussion):
        from coursehub.infrastructure import attachment_storage

        monkeypatch.setattr(attachment_storage.settings, "gcs_attachments_bucket", None)
        storage = GCSAttachmentStorage()
        storage._client = MagicMock()

        assert await storage.relocate(discussion, 1, 2) is False
        storage._client.list_blobs.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_credentials_reports_failure(self, monkeypatch, discussion):
        from coursehub.infrastructure import attachment_storage

        def no_credentials(*args, **kwargs):
            raise DefaultCredentialsError("no application default credentials")

        monkeypatch.setattr(attachment_storage.storage, "Client", no_credentials)
        monkeypatch.setattr(attachment_storage.settings, "gcs_attachments_bucket", "attachments")

        assert await GCSAttachmentStorage().relocate(discussion, 1, 2) is False


class TestGetAttachmentStorage:
    """Tests for backend selection."""

    def test_local(self, monkeypatch):
        from coursehub.infrastructure import attachment_storage

        monkeypatch.setattr(attachment_storage.settings, "attachment_storage_backend", "local")
        assert isinstance(get_attachment_storage(), LocalAttachmentStorage)

    def test_gcs(self, monkeypatch):
        from coursehub.infrastructure import attachment_storage

        monkeypatch.setattr(attachment_storage.settings, "attachment_storage_backend", "GCS")
        assert isinstance(get_attachment_storage(), GCSAttachmentStorage)

    def test_unknown(self, monkeypatch):
        from coursehub.infrastructure import attachment_storage

        monkeypatch.setattr(attachment_storage.settings, "attachment_storage_backend", "ftp")
        with pytest.raises(AttachmentStorageError):
            get_attachment_storage()
