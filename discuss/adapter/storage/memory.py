"""In-memory blob store for testing."""

from discuss.domain.storage import BlobStore


class InMemoryBlobStore(BlobStore):
    """Keeps files in a dict.

    Names listed in ``failing_names`` raise ``PermissionError`` on delete,
    to exercise purge error handling.
    """

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.failing_names: set[str] = set()

    async def write(self, name: str, data: bytes) -> None:
        self.files[name] = data

    async def exists(self, name: str) -> bool:
        return name in self.files

    async def delete(self, name: str) -> None:
        if name in self.failing_names:
            raise PermissionError(f"Cannot delete {name}")
        if name not in self.files:
            raise FileNotFoundError(name)
        del self.files[name]
