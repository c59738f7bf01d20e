"""Blob store implementations."""

from .local import LocalBlobStore
from .memory import InMemoryBlobStore

__all__ = [
    "InMemoryBlobStore",
    "LocalBlobStore",
]
