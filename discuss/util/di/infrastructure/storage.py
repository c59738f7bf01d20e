"""Blob storage infrastructure providers."""

from dishka import Scope, provide

from discuss.adapter.storage import LocalBlobStore
from discuss.config import AttachmentSettings
from discuss.domain.storage import BlobStore
from discuss.util.di.base import ProviderBase


class StorageProvider(ProviderBase):
    """Storage component base."""

    __mock_component__ = "storage"


class ProdStorageProvider(StorageProvider):
    """Production storage provider writing to the local upload directory."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_blob_store(self, attachment_settings: AttachmentSettings) -> BlobStore:
        """Provide filesystem blob store."""
        return LocalBlobStore(root=attachment_settings.upload_dir)
