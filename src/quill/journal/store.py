"""EntryStore — the session's single source of truth for diary entries.

Every mutation is written through the local :class:`EntryRepository`
(awaited; a failure aborts the mutation and leaves memory untouched)
and then handed to the :class:`SyncQueue` for best-effort remote
mirroring. Entries with blank content are never mirrored on create or
update.

The store is an ordinary object owned by whoever builds it::

    async with EntryStore(LocalEntryRepository.at_path(path), remote) as store:
        entry = await store.create_entry()
        await store.update_entry(entry.id, content="A quiet day.")
"""

from __future__ import annotations

import asyncio
import calendar
import contextlib
from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from loguru import logger

from quill.core.events import ENTRY_CREATED, ENTRY_DELETED, ENTRY_UPDATED, STORE_LOADED, Event, EventBus
from quill.core.exceptions import DuplicateEntryError, EntryNotFoundError, LoadError
from quill.core.storage import StorageError

from .config import SyncConfig
from .models import DiaryEntry, Emotion, new_entry_id, normalize_day
from .persistence import EntryRepository, LocalEntryRepository
from .sync import NullRemoteSync, RemoteSync, SyncJob, SyncQueue, create_remote

if TYPE_CHECKING:
    from quill.core.config import Config

_UPDATABLE_FIELDS = frozenset({"content", "emotions", "tags", "writing_time", "encrypted", "day"})
_READ_ONLY_FIELDS = frozenset({"id", "word_count", "created_at", "updated_at"})


class EntryStore:
    """In-memory entry collection with write-through persistence.

    Args:
        repository: Local persistence; every write is awaited.
        remote: Remote mirror. Defaults to a no-op remote.
        sync_config: Retry and capacity settings for the sync queue.
        event_bus: Receives entry lifecycle events when given.
        clock: Source of "now"; injectable for tests.
    """

    def __init__(
        self,
        repository: EntryRepository,
        remote: RemoteSync | None = None,
        *,
        sync_config: SyncConfig | None = None,
        event_bus: EventBus | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository
        self.sync = SyncQueue(remote or NullRemoteSync(), sync_config, event_bus=event_bus)
        self._event_bus = event_bus
        self._clock = clock

        self.entries: list[DiaryEntry] = []
        self.current_entry: DiaryEntry | None = None
        self.is_loading = False
        self.error: str | None = None
        self.last_error: Exception | None = None

        self._issued_ids: set[str] = set()
        self._create_lock = asyncio.Lock()
        self._entry_locks: dict[str, asyncio.Lock] = {}

    @classmethod
    def from_config(cls, config: Config, *, event_bus: EventBus | None = None) -> EntryStore:
        """Build a store on the configured entries directory and remote."""
        sync_config = SyncConfig.from_config(config)
        return cls(
            LocalEntryRepository.at_path(config.get_entries_dir()),
            create_remote(sync_config),
            sync_config=sync_config,
            event_bus=event_bus,
        )

    # -- Lifecycle -----------------------------------------------------------

    async def open(self) -> EntryStore:
        """Load persisted entries and start the sync consumer."""
        await self.load()
        self.sync.start()
        return self

    async def close(self) -> None:
        """Flush pending remote writes and stop the sync consumer."""
        await self.sync.drain()
        await self.sync.stop()

    async def __aenter__(self) -> EntryStore:
        return await self.open()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def load(self) -> None:
        """Replace the collection with everything in the repository, newest first.

        A failed load leaves the store empty but usable, with ``error`` set.
        """
        self.is_loading = True
        self.error = None
        try:
            loaded = await self.repository.get_all()
        except Exception as e:
            self.last_error = LoadError(f"Failed to load diary entries: {e}")
            self.last_error.__cause__ = e
            self.error = "Failed to load diary entries"
            self.entries = []
            logger.opt(exception=e).error(f"Failed to initialize diary store: {e}")
            return
        finally:
            self.is_loading = False

        loaded.sort(key=lambda e: (e.day, e.created_at), reverse=True)
        self.entries = loaded
        self._issued_ids.update(e.id for e in loaded)
        logger.info(f"Loaded {len(loaded)} diary entries")
        await self._emit(STORE_LOADED, {"count": len(loaded)})

    # -- Helpers -------------------------------------------------------------

    def _now(self) -> datetime:
        return self._clock()

    def _today(self) -> date:
        return self._now().date()

    def _lock_for(self, entry_id: str) -> asyncio.Lock:
        lock = self._entry_locks.get(entry_id)
        if lock is None:
            lock = self._entry_locks[entry_id] = asyncio.Lock()
        return lock

    def _next_id(self) -> str:
        entry_id = new_entry_id()
        while entry_id in self._issued_ids:
            entry_id = new_entry_id()
        self._issued_ids.add(entry_id)
        return entry_id

    def _find_by_day(self, day: date) -> DiaryEntry | None:
        return next((e for e in self.entries if e.day == day), None)

    def _index_of(self, entry_id: str) -> int:
        for i, entry in enumerate(self.entries):
            if entry.id == entry_id:
                return i
        raise EntryNotFoundError(entry_id)

    async def _persist(self, write, entry_or_id: Any, action: str) -> None:
        """Run a repository write, recording the failure before re-raising it."""
        self.error = None
        try:
            await write(entry_or_id)
        except StorageError as e:
            self.error = f"Failed to {action} entry"
            self.last_error = e
            logger.error(f"Failed to {action} entry: {e}")
            raise

    async def _emit(self, name: str, payload: dict[str, Any]) -> None:
        if self._event_bus:
            await self._event_bus.emit(Event(name=name, payload=payload, source="store"))

    # -- Mutations -----------------------------------------------------------

    async def create_entry(self, day: date | datetime | None = None, *, content: str = "") -> DiaryEntry:
        """Return the entry for *day* (default today), creating it if needed.

        An existing entry for the day is returned unchanged and nothing
        is written. *content* only seeds a brand-new entry.
        """
        entry_day = normalize_day(day) if day is not None else self._today()

        async with self._create_lock:
            existing = self._find_by_day(entry_day)
            if existing is not None:
                self.current_entry = existing
                return existing

            now = self._now()
            entry = DiaryEntry(
                id=self._next_id(),
                day=entry_day,
                content=content,
                created_at=now,
                updated_at=now,
            )
            await self._persist(self.repository.add, entry, "create")

            if not entry.is_blank:
                self.sync.enqueue(SyncJob.save(entry))

            self.entries.append(entry)
            self.current_entry = entry

        logger.debug(f"Created entry {entry.id} for {entry_day.isoformat()}")
        await self._emit(ENTRY_CREATED, {"entry_id": entry.id, "day": entry_day.isoformat()})
        return entry

    async def update_entry(self, entry_id: str, **fields: Any) -> DiaryEntry:
        """Merge *fields* into an entry and persist it.

        Raises:
            EntryNotFoundError: *entry_id* is not in the collection.
            ValueError: A field is unknown or derived.
            DuplicateEntryError: ``day`` would collide with another entry.
            StorageError: The local write failed; nothing changed.
        """
        bad = set(fields) - _UPDATABLE_FIELDS
        if bad:
            kind = "read-only" if bad <= _READ_ONLY_FIELDS else "unknown"
            raise ValueError(f"Cannot update {kind} entry field(s): {', '.join(sorted(bad))}")

        # A day move claims a day like a create does: create lock first, then entry lock
        day_lock = self._create_lock if "day" in fields else contextlib.nullcontext()
        async with day_lock, self._lock_for(entry_id):
            index = self._index_of(entry_id)
            entry = self.entries[index]

            changes = dict(fields)
            if "day" in changes:
                changes["day"] = normalize_day(changes["day"])
                clash = self._find_by_day(changes["day"])
                if clash is not None and clash.id != entry_id:
                    raise DuplicateEntryError(f"An entry already exists for {changes['day'].isoformat()}")
            if "emotions" in changes:
                changes["emotions"] = [e if isinstance(e, Emotion) else Emotion.from_dict(e) for e in changes["emotions"]]

            updated = entry.with_changes(**changes, updated_at=self._now())
            await self._persist(self.repository.update, updated, "update")

            if not updated.is_blank:
                self.sync.enqueue(SyncJob.update(updated))

            self.entries[self._index_of(entry_id)] = updated
            if self.current_entry is not None and self.current_entry.id == entry_id:
                self.current_entry = updated

        await self._emit(ENTRY_UPDATED, {"entry_id": entry_id, "fields": sorted(fields)})
        return updated

    async def delete_entry(self, entry_id: str) -> None:
        """Remove an entry locally (awaited) and remotely (queued)."""
        async with self._lock_for(entry_id):
            self._index_of(entry_id)
            await self._persist(self.repository.delete, entry_id, "delete")
            self.sync.enqueue(SyncJob.delete(entry_id))

            self.entries = [e for e in self.entries if e.id != entry_id]
            if self.current_entry is not None and self.current_entry.id == entry_id:
                self.current_entry = None
        self._entry_locks.pop(entry_id, None)

        logger.debug(f"Deleted entry {entry_id}")
        await self._emit(ENTRY_DELETED, {"entry_id": entry_id})

    def set_current_entry(self, entry: DiaryEntry | None) -> None:
        self.current_entry = entry

    # -- Queries -------------------------------------------------------------

    def get_entry(self, entry_id: str) -> DiaryEntry | None:
        return next((e for e in self.entries if e.id == entry_id), None)

    def get_entries_by_date_range(self, start: date | datetime, end: date | datetime) -> list[DiaryEntry]:
        """Entries whose day falls within [start, end], inclusive."""
        start_day, end_day = normalize_day(start), normalize_day(end)
        return [e for e in self.entries if start_day <= e.day <= end_day]

    def search_entries(self, query: str) -> list[DiaryEntry]:
        """Case-insensitive substring match over content, tags and emotion names."""
        needle = query.lower()
        return [
            e
            for e in self.entries
            if needle in e.content.lower()
            or any(needle in tag.lower() for tag in e.tags)
            or any(needle in emotion.name.lower() for emotion in e.emotions)
        ]

    def get_todays_entry(self) -> DiaryEntry | None:
        return self._find_by_day(self._today())

    async def get_or_create_todays_entry(self) -> DiaryEntry:
        return self.get_todays_entry() or await self.create_entry()

    def get_entries_for_month(self, year: int, month: int) -> list[DiaryEntry]:
        last_day = calendar.monthrange(year, month)[1]
        return self.get_entries_by_date_range(date(year, month, 1), date(year, month, last_day))
