"""Mock storage provider for testing."""

from dishka import Scope, provide

from discuss.adapter.storage import InMemoryBlobStore
from discuss.domain.storage import BlobStore
from discuss.util.di.infrastructure.storage import StorageProvider


class MockStorageProvider(StorageProvider):
    """Mock storage provider keeping files in memory."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_blob_store(self) -> BlobStore:
        """Provide in-memory blob store."""
        return InMemoryBlobStore()
