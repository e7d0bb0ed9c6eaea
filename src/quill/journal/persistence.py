"""EntryRepository protocol — the contract for local entry persistence.

The entry store writes through a repository and awaits every call: a
mutation is committed only once the repository returns. Implementations
must raise :class:`~quill.core.storage.StorageError` on failure so the
store can abort the mutation.
"""

from __future__ import annotations

import json
from typing import Protocol, runtime_checkable

from loguru import logger

from quill.core.storage import LocalStorage, StorageBackend, StorageError

from .models import DiaryEntry

ENTRY_PREFIX = "entries/"


@runtime_checkable
class EntryRepository(Protocol):
    """Durable key-value storage of entries keyed by id."""

    async def add(self, entry: DiaryEntry) -> None:
        """Insert a new entry. Fails if the id is already stored."""
        ...

    async def update(self, entry: DiaryEntry) -> None:
        """Insert or replace an entry."""
        ...

    async def delete(self, entry_id: str) -> None:
        """Remove an entry. Deleting a missing id is not an error."""
        ...

    async def get_all(self) -> list[DiaryEntry]:
        """Return every stored entry, with date fields rebuilt."""
        ...


class LocalEntryRepository:
    """One JSON document per entry on a :class:`StorageBackend`.

    Example::

        repo = LocalEntryRepository.at_path("~/.quill-data/entries")
        await repo.add(entry)
        entries = await repo.get_all()
    """

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    @classmethod
    def at_path(cls, base_path: str) -> LocalEntryRepository:
        return cls(LocalStorage(base_path=base_path))

    @staticmethod
    def _key(entry_id: str) -> str:
        return f"{ENTRY_PREFIX}{entry_id}.json"

    @staticmethod
    def _encode(entry: DiaryEntry) -> bytes:
        return json.dumps(entry.to_dict(), ensure_ascii=False, indent=2).encode("utf-8")

    async def add(self, entry: DiaryEntry) -> None:
        key = self._key(entry.id)
        if await self.backend.exists(key):
            raise StorageError(f"Entry {entry.id} already exists")
        await self.backend.save(key, self._encode(entry))

    async def update(self, entry: DiaryEntry) -> None:
        await self.backend.save(self._key(entry.id), self._encode(entry))

    async def delete(self, entry_id: str) -> None:
        await self.backend.delete(self._key(entry_id))

    async def get_all(self) -> list[DiaryEntry]:
        entries: list[DiaryEntry] = []
        async for key in self.backend.list_keys(prefix=ENTRY_PREFIX):
            if not key.endswith(".json"):
                continue
            raw = await self.backend.load(key)
            try:
                entries.append(DiaryEntry.from_dict(json.loads(raw.decode("utf-8"))))
            except (ValueError, KeyError, TypeError) as e:
                # keep loading the remaining entries
                logger.warning(f"Skipping unreadable entry file '{key}': {e}")
        return entries


class MemoryEntryRepository:
    """In-process repository; entries live only as long as the object."""

    def __init__(self, entries: list[DiaryEntry] | None = None):
        self._data: dict[str, dict] = {e.id: e.to_dict() for e in entries or []}

    def __len__(self) -> int:
        return len(self._data)

    async def add(self, entry: DiaryEntry) -> None:
        if entry.id in self._data:
            raise StorageError(f"Entry {entry.id} already exists")
        self._data[entry.id] = entry.to_dict()

    async def update(self, entry: DiaryEntry) -> None:
        self._data[entry.id] = entry.to_dict()

    async def delete(self, entry_id: str) -> None:
        self._data.pop(entry_id, None)

    async def get_all(self) -> list[DiaryEntry]:
        return [DiaryEntry.from_dict(d) for d in self._data.values()]
