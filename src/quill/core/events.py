"""Entry lifecycle notifications.

The entry store and the sync queue publish :class:`Event` objects on an
:class:`EventBus`; listeners subscribe by exact name, by namespace
(``"entry.*"``) or to everything (``"*"``). Hooks can be sync or async.
A failing hook is logged and never reaches the publisher.

Usage::

    from quill.core.events import SYNC_FAILED, Event, EventBus

    bus = EventBus()

    def warn(event: Event) -> None:
        print(f"Not mirrored: {event.payload['entry_id']}")

    bus.on(SYNC_FAILED, warn)
    store = EntryStore(repository, remote, event_bus=bus)
"""

from __future__ import annotations

import inspect
from collections import defaultdict
from dataclasses import dataclass, field
from time import time
from typing import Any

from loguru import logger

ENTRY_CREATED = "entry.created"
ENTRY_UPDATED = "entry.updated"
ENTRY_DELETED = "entry.deleted"
STORE_LOADED = "store.loaded"
SYNC_FAILED = "sync.failed"

ALL_EVENTS = "*"

# Callable[[Event], None] | Callable[[Event], Awaitable[None]]
Hook = Any


@dataclass(frozen=True)
class Event:
    """Something that happened to the diary. ``payload`` carries ids, not entries."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time)
    source: str = ""

    @property
    def namespace(self) -> str:
        """``"entry"`` for ``"entry.updated"``."""
        return self.name.split(".", 1)[0]


class EventBus:
    """Publish/subscribe hub for store and sync events."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)

    def on(self, pattern: str, hook: Hook) -> None:
        """Call *hook* for events matching *pattern*.

        *pattern* is an event name, ``"<namespace>.*"`` or ``"*"``.
        """
        self._hooks[pattern].append(hook)

    def off(self, pattern: str, hook: Hook) -> None:
        if hook in self._hooks.get(pattern, []):
            self._hooks[pattern].remove(hook)

    def listeners(self, event: Event) -> list[Hook]:
        """Hooks for *event*: exact name first, then namespace, then catch-all."""
        return [
            *self._hooks.get(event.name, []),
            *self._hooks.get(f"{event.namespace}.*", []),
            *self._hooks.get(ALL_EVENTS, []),
        ]

    async def emit(self, event: Event) -> None:
        for hook in self.listeners(event):
            try:
                result = hook(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.warning(f"Listener for {event.name} failed: {exc}")
