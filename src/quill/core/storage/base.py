"""
Abstract base class for storage backends.

A unified async interface over "keys" (slash-separated relative names)
holding opaque bytes. Backends own durability: ``save`` must not return
until the bytes are committed.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from quill.core.exceptions import QuillError


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    async def save(self, key: str, data: bytes) -> None:
        """Write *data* under *key*, replacing any previous value."""

    @abstractmethod
    async def load(self, key: str) -> bytes:
        """Load data from storage. Raises StorageKeyError if not found."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a key exists in storage."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete an object. Returns True if deleted, False if it didn't exist."""

    @abstractmethod
    def list_keys(self, prefix: str = "", limit: int | None = None) -> AsyncIterator[str]:
        """List keys with optional prefix filter."""


class StorageError(QuillError):
    """Base exception for storage errors (a local write or read was rejected)."""


class StorageKeyError(StorageError, KeyError):
    """Raised when a storage key doesn't exist."""


class StoragePermissionError(StorageError):
    """Raised when a storage operation is not permitted."""
