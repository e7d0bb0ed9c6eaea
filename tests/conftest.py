"""Shared test fixtures for quill."""

import os
from datetime import datetime, timedelta

import pytest

from quill.core.storage import StorageError
from quill.journal.models import DiaryEntry, Emotion, EmotionCategory

NOW = datetime(2026, 10, 19, 21, 30)


class FakeRemote:
    """Records remote calls; fails the first *fail_times* of them."""

    def __init__(self, fail_times=0, error=None):
        self.calls: list[tuple[str, str]] = []
        self.fail_times = fail_times
        self.error = error or RuntimeError("remote unavailable")

    async def _record(self, action, entry_id):
        self.calls.append((action, entry_id))
        if self.fail_times:
            self.fail_times -= 1
            raise self.error

    async def save_entry(self, entry):
        await self._record("save", entry.id)

    async def update_entry(self, entry):
        await self._record("update", entry.id)

    async def delete_entry(self, entry_id):
        await self._record("delete", entry_id)


class BrokenRepository:
    """Repository whose every operation fails."""

    async def add(self, entry):
        raise StorageError("disk full")

    async def update(self, entry):
        raise StorageError("disk full")

    async def delete(self, entry_id):
        raise StorageError("disk full")

    async def get_all(self):
        raise StorageError("database locked")


@pytest.fixture
def now():
    """Fixed reference time: 2026-10-19 21:30."""
    return NOW


@pytest.fixture
def today(now):
    return now.date()


@pytest.fixture
def fixed_clock(now):
    return lambda: now


@pytest.fixture
def make_entry(today):
    """Build an entry for a day, given as a date or as days before today."""

    def _make(day, content="", *, hour=20, emotions=(), tags=(), entry_id=None):
        if isinstance(day, int):
            day = today - timedelta(days=day)
        created = datetime.combine(day, datetime.min.time()).replace(hour=hour)
        return DiaryEntry(
            id=entry_id or f"entry-{day.isoformat()}-{hour}",
            day=day,
            content=content,
            emotions=list(emotions),
            tags=list(tags),
            created_at=created,
            updated_at=created,
        )

    return _make


@pytest.fixture
def make_emotion():
    def _make(name, category=EmotionCategory.NEUTRAL, intensity=5):
        return Emotion(id=name.lower(), name=name, intensity=intensity, category=category)

    return _make


@pytest.fixture
def fake_remote():
    return FakeRemote()


@pytest.fixture
def flaky_remote():
    """Remote that fails its first two calls."""
    return FakeRemote(fail_times=2)


@pytest.fixture
def broken_repository():
    return BrokenRepository()


@pytest.fixture
def tmp_config_file(tmp_path):
    """Create a temporary YAML config file pointing at tmp_path."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_path, "data"),
            "entries_dir": os.path.join(tmp_path, "data", "entries"),
        },
        "sync": {"enabled": False, "max_attempts": 5},
        "analytics": {"heatmap_days": 28},
    }
    config_path = os.path.join(tmp_path, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path
