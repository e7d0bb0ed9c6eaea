"""Shared setup logic for CLI commands."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import date
from pathlib import Path
from typing import TypeVar

import click
from loguru import logger

from quill.core.config import Config
from quill.core.events import ALL_EVENTS, SYNC_FAILED, Event, EventBus
from quill.core.utils.logging import configure_logging
from quill.journal.models import DEFAULT_EMOTIONS, DiaryEntry, Emotion
from quill.journal.store import EntryStore

QUILL_DIR = Path.home() / ".quill"
CONFIG_PATH = QUILL_DIR / "config.yaml"

T = TypeVar("T")


def build_config(config_file: str | None, data_dir: str | None, verbose: bool = False) -> Config:
    """Load config and configure logging from it."""
    config = Config(config_file=config_file or str(CONFIG_PATH), data_dir=data_dir)
    if data_dir:
        # An explicit --data-dir wins over paths from the config file
        config.set("paths.data_dir", data_dir)
        config.set("paths.entries_dir", str(Path(data_dir) / "entries"))
        config.set("paths.log_dir", str(Path(data_dir) / "logs"))
    configure_logging(config, verbose)
    return config


def _warn_unsynced(event: Event) -> None:
    click.echo(f"Warning: could not sync entry {event.payload['entry_id']}: {event.payload['error']}", err=True)


def _trace(event: Event) -> None:
    logger.debug(f"{event.source}: {event.name} {event.payload}")


def cli_event_bus() -> EventBus:
    """Bus that reports failed syncs on stderr and traces every event at DEBUG."""
    bus = EventBus()
    bus.on(SYNC_FAILED, _warn_unsynced)
    bus.on(ALL_EVENTS, _trace)
    return bus


def with_store(config: Config, action: Callable[[EntryStore], Awaitable[T]]) -> T:
    """Open the configured store, run *action*, and close it again."""

    async def _run() -> T:
        async with EntryStore.from_config(config, event_bus=cli_event_bus()) as store:
            if store.error:
                click.echo(f"Warning: {store.error}", err=True)
            return await action(store)

    return asyncio.run(_run())


def parse_day(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD, got '{value}'") from None


def resolve_emotion(name: str) -> Emotion:
    """Match a palette emotion by id or name, or make a custom one."""
    wanted = name.strip().lower()
    for emotion in DEFAULT_EMOTIONS:
        if wanted in (emotion.id, emotion.name.lower()):
            return emotion
    return Emotion(id=wanted.replace(" ", "-"), name=name.strip().title(), custom=True)


def format_entry(entry: DiaryEntry) -> str:
    lines = [f"{entry.day.isoformat()}  ({entry.word_count} words)  [{entry.id}]"]
    if entry.emotions:
        lines.append("Emotions: " + ", ".join(e.name for e in entry.emotions))
    if entry.tags:
        lines.append("Tags: " + ", ".join(entry.tags))
    lines.append("")
    lines.append(entry.content or "(Empty entry)")
    return "\n".join(lines)
