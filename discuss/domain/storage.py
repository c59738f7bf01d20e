"""Blob store interface for attachment files."""

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Named-file storage backing comment attachments.

    Implementations live in the adapter layer.
    """

    @abstractmethod
    async def write(self, name: str, data: bytes) -> None:
        """Write a file under the given name, replacing any previous content."""
        pass

    @abstractmethod
    async def exists(self, name: str) -> bool:
        """Whether a file with this name is stored."""
        pass

    @abstractmethod
    async def delete(self, name: str) -> None:
        """Delete a stored file.

        Raises:
            FileNotFoundError: If no such file is stored
            OSError: On any other storage failure
        """
        pass
