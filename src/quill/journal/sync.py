"""Remote sync — best-effort mirroring of entry writes.

Local state is authoritative. The store hands each remote write to a
:class:`SyncQueue` and moves on; a background consumer calls the
:class:`RemoteSync` adapter, retries with exponential backoff, and parks
jobs that keep failing in a dead-letter list. Nothing here ever raises
into the caller of the store.
"""

from __future__ import annotations

import asyncio
import enum
import json
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from quill.core.events import SYNC_FAILED, Event, EventBus
from quill.core.exceptions import SyncError

from .config import SyncConfig
from .models import DiaryEntry


@runtime_checkable
class RemoteSync(Protocol):
    """Remote mirror of the entry collection. Every call may fail."""

    async def save_entry(self, entry: DiaryEntry) -> None: ...

    async def update_entry(self, entry: DiaryEntry) -> None: ...

    async def delete_entry(self, entry_id: str) -> None: ...


class NullRemoteSync:
    """Remote that accepts everything and does nothing (sync disabled)."""

    async def save_entry(self, entry: DiaryEntry) -> None:
        logger.debug(f"Sync disabled, not saving {entry.id}")

    async def update_entry(self, entry: DiaryEntry) -> None:
        logger.debug(f"Sync disabled, not updating {entry.id}")

    async def delete_entry(self, entry_id: str) -> None:
        logger.debug(f"Sync disabled, not deleting {entry_id}")


class HttpRemoteSync:
    """JSON-over-HTTP remote entry service.

    ``POST {endpoint}/entries``, ``PUT {endpoint}/entries/{id}`` and
    ``DELETE {endpoint}/entries/{id}`` with a bearer token. Requests run
    in a worker thread so the event loop never blocks on the network.
    """

    def __init__(self, endpoint: str, api_key: str = "", timeout: int = 15):
        if not endpoint:
            raise ValueError("endpoint is required")
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        url = f"{self.endpoint}/{path.lstrip('/')}"
        headers: dict[str, str] = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        data = None
        if payload is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(payload).encode("utf-8")

        req = urllib.request.Request(url=url, data=data, method=method, headers=headers)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="ignore") if hasattr(e, "read") else ""
            raise SyncError(f"Remote {method} {path} failed with {e.code}: {body or e.reason}") from e
        except (urllib.error.URLError, TimeoutError) as e:
            raise SyncError(f"Remote {method} {path} failed: {e}") from e

        if not raw:
            return {}
        try:
            return json.loads(raw.decode("utf-8", errors="ignore"))
        except json.JSONDecodeError:
            return {"raw": raw.decode("utf-8", errors="ignore")}

    async def save_entry(self, entry: DiaryEntry) -> None:
        await asyncio.to_thread(self._request, "POST", "entries", entry.to_dict())

    async def update_entry(self, entry: DiaryEntry) -> None:
        entry_path = f"entries/{urllib.parse.quote(entry.id, safe='')}"
        await asyncio.to_thread(self._request, "PUT", entry_path, entry.to_dict())

    async def delete_entry(self, entry_id: str) -> None:
        entry_path = f"entries/{urllib.parse.quote(entry_id, safe='')}"
        await asyncio.to_thread(self._request, "DELETE", entry_path)


def create_remote(config: SyncConfig) -> RemoteSync:
    """Pick the remote adapter for *config*."""
    if config.enabled and config.endpoint:
        return HttpRemoteSync(config.endpoint, api_key=config.api_key, timeout=int(config.timeout or 15))
    if config.enabled:
        logger.warning("Sync is enabled but no endpoint is configured; remote writes are disabled")
    return NullRemoteSync()


class SyncAction(enum.Enum):
    SAVE = "save"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class SyncJob:
    """One remote write waiting in the queue."""

    action: SyncAction
    entry_id: str
    entry: DiaryEntry | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    attempts: int = 0
    enqueued_at: float = field(default_factory=time.time)

    @classmethod
    def save(cls, entry: DiaryEntry) -> SyncJob:
        return cls(action=SyncAction.SAVE, entry_id=entry.id, entry=entry)

    @classmethod
    def update(cls, entry: DiaryEntry) -> SyncJob:
        return cls(action=SyncAction.UPDATE, entry_id=entry.id, entry=entry)

    @classmethod
    def delete(cls, entry_id: str) -> SyncJob:
        return cls(action=SyncAction.DELETE, entry_id=entry_id)


_SENTINEL = object()


class SyncQueue:
    """Outbound queue of remote writes with its own retry policy.

    :meth:`enqueue` never blocks and never raises. Jobs run one at a time
    in submission order on a background task started by :meth:`start`.

    Args:
        remote: Adapter that performs the writes.
        config: Retry, timeout and capacity settings.
        event_bus: Receives a ``sync.failed`` event per dead-lettered job.
    """

    def __init__(
        self,
        remote: RemoteSync,
        config: SyncConfig | None = None,
        event_bus: EventBus | None = None,
    ):
        self.remote = remote
        self.config = config or SyncConfig()
        self._event_bus = event_bus
        self._queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=self.config.queue_size)
        self._consumer_task: asyncio.Task | None = None
        self._dead_letters: list[tuple[SyncJob, str, float]] = []
        self.completed = 0

    @property
    def is_running(self) -> bool:
        return self._consumer_task is not None and not self._consumer_task.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    # ── Public API ─────────────────────────────────────────────────

    def enqueue(self, job: SyncJob) -> bool:
        """Queue *job*. Returns False (and logs) if the queue is full."""
        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull:
            logger.warning(f"Sync queue full, dropped {job.action.value} for {job.entry_id}")
            return False
        logger.debug(f"Queued sync {job.action.value} for {job.entry_id} (job {job.id})")
        return True

    def start(self) -> None:
        """Create the background consumer task. Needs a running event loop."""
        if self.is_running:
            logger.warning("SyncQueue consumer already running")
            return
        self._consumer_task = asyncio.create_task(self._consume_loop(), name="quill-sync-consumer")
        logger.debug("SyncQueue consumer started")

    async def drain(self) -> None:
        """Wait until every queued job has finished (succeeded or dead-lettered)."""
        if not self.is_running:
            while not self._queue.empty():
                item = self._queue.get_nowait()
                try:
                    if item is not _SENTINEL:
                        await self._run_job(item)
                finally:
                    self._queue.task_done()
            return
        await self._queue.join()

    async def stop(self) -> None:
        """Finish outstanding jobs, then shut the consumer down."""
        if not self._consumer_task:
            return
        await self._queue.put(_SENTINEL)
        await self._consumer_task
        self._consumer_task = None
        logger.debug("SyncQueue consumer stopped")

    # ── Dead letter introspection ──────────────────────────────────

    @property
    def dead_letter_count(self) -> int:
        return len(self._dead_letters)

    def get_dead_letters(self) -> list[tuple[SyncJob, str, float]]:
        """Return dead letters as (job, error_message, timestamp)."""
        return list(self._dead_letters)

    def requeue_dead_letters(self) -> int:
        """Give every dead-lettered job a fresh set of attempts."""
        jobs = [job for job, _, _ in self._dead_letters]
        self._dead_letters.clear()
        requeued = 0
        for job in jobs:
            job.attempts = 0
            if self.enqueue(job):
                requeued += 1
        return requeued

    # ── Internal ───────────────────────────────────────────────────

    async def _consume_loop(self) -> None:
        while True:
            item = await self._queue.get()
            if item is _SENTINEL:
                self._queue.task_done()
                break
            try:
                await self._run_job(item)
            except Exception:
                logger.exception(f"Unhandled error running sync job {item.id}")
            finally:
                self._queue.task_done()

    async def _call(self, job: SyncJob) -> None:
        if job.action is SyncAction.SAVE:
            coro = self.remote.save_entry(job.entry)
        elif job.action is SyncAction.UPDATE:
            coro = self.remote.update_entry(job.entry)
        else:
            coro = self.remote.delete_entry(job.entry_id)
        if self.config.timeout:
            await asyncio.wait_for(coro, timeout=self.config.timeout)
        else:
            await coro

    async def _run_job(self, job: SyncJob) -> None:
        while True:
            job.attempts += 1
            try:
                await self._call(job)
            except Exception as exc:
                error = str(exc) or type(exc).__name__
                if job.attempts >= self.config.max_attempts:
                    await self._dead_letter(job, error)
                    return
                delay = self.config.retry_delay(job.attempts)
                logger.info(
                    f"Sync {job.action.value} for {job.entry_id} failed "
                    f"(attempt {job.attempts}/{self.config.max_attempts}), retrying in {delay:.1f}s: {error}"
                )
                if delay:
                    await asyncio.sleep(delay)
                continue
            self.completed += 1
            logger.debug(f"Synced {job.action.value} for {job.entry_id}")
            return

    async def _dead_letter(self, job: SyncJob, error: str) -> None:
        self._dead_letters.append((job, error, time.time()))
        logger.warning(
            f"Failed to sync {job.action.value} for entry {job.entry_id} after {job.attempts} attempts: {error}"
        )
        if self._event_bus:
            await self._event_bus.emit(
                Event(
                    name=SYNC_FAILED,
                    payload={"entry_id": job.entry_id, "action": job.action.value, "error": error},
                    source="sync",
                )
            )
