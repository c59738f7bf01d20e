"""Filesystem blob store."""

import asyncio
from pathlib import Path, PurePath

import logfire

from discuss.domain.storage import BlobStore


class LocalBlobStore(BlobStore):
    """Stores attachment files in a local directory.

    Names are reduced to their final path component, so nothing can be
    written or removed outside the root directory. File I/O runs in a
    worker thread.
    """

    def __init__(self, root: Path) -> None:
        """Initialize blob store.

        Args:
            root: Directory holding the files (created on first write)
        """
        self.root = root

    def _path(self, name: str) -> Path:
        base = PurePath(name.replace("\\", "/")).name
        if base in ("", ".", ".."):
            raise FileNotFoundError(f"Invalid blob name: {name!r}")
        return self.root / base

    async def write(self, name: str, data: bytes) -> None:
        """Write a file, creating the root directory if needed."""
        path = self._path(name)
        await asyncio.to_thread(self._write, path, data)
        logfire.debug("Blob written", name=path.name, size=len(data))

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def exists(self, name: str) -> bool:
        """Whether the file is present."""
        try:
            path = self._path(name)
        except FileNotFoundError:
            return False
        return await asyncio.to_thread(path.is_file)

    async def delete(self, name: str) -> None:
        """Remove the file.

        Raises:
            FileNotFoundError: If the file is missing
            OSError: If removal fails for any other reason
        """
        path = self._path(name)
        await asyncio.to_thread(path.unlink)
        logfire.debug("Blob deleted", name=path.name)
