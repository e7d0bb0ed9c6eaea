"""Core data models for diary entries.

An entry is identified by its calendar ``day``; the unnormalized
``created_at`` timestamp is kept separately for time-of-day analytics.
Serialized form uses camelCase keys and ISO-8601 strings so files stay
readable and portable.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class EmotionCategory(StrEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Emotion:
    """An emotion attached to an entry.

    Value type: always embedded in its owning entry, compared by value.

    Attributes:
        id: Identifier within the emotion palette (e.g. ``"happy"``).
        name: Display name, used for search and frequency analytics.
        intensity: Strength on a 1-10 scale.
        color: Display color (hex string).
        category: Positive, negative or neutral.
        custom: Whether the user defined this emotion.
    """

    id: str
    name: str
    intensity: int = 5
    color: str = "#6b7280"
    category: EmotionCategory = EmotionCategory.NEUTRAL
    custom: bool = False

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValueError("Emotion name must be a non-empty string")
        if not isinstance(self.intensity, int) or not 1 <= self.intensity <= 10:
            raise ValueError(f"Emotion intensity must be an integer 1-10, got {self.intensity!r}")
        object.__setattr__(self, "category", EmotionCategory(self.category))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "intensity": self.intensity,
            "color": self.color,
            "category": self.category.value,
            "custom": self.custom,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Emotion:
        return cls(
            id=str(data.get("id") or data["name"].lower()),
            name=data["name"],
            intensity=int(data.get("intensity", 5)),
            color=data.get("color", "#6b7280"),
            category=EmotionCategory(data.get("category", "neutral")),
            custom=bool(data.get("custom", False)),
        )


# Starter palette offered to new users.
DEFAULT_EMOTIONS: tuple[Emotion, ...] = (
    Emotion("happy", "Happy", 5, "#fbbf24", EmotionCategory.POSITIVE),
    Emotion("sad", "Sad", 5, "#3b82f6", EmotionCategory.NEGATIVE),
    Emotion("angry", "Angry", 5, "#ef4444", EmotionCategory.NEGATIVE),
    Emotion("excited", "Excited", 7, "#f59e0b", EmotionCategory.POSITIVE),
    Emotion("calm", "Calm", 4, "#10b981", EmotionCategory.POSITIVE),
    Emotion("anxious", "Anxious", 6, "#8b5cf6", EmotionCategory.NEGATIVE),
    Emotion("grateful", "Grateful", 6, "#ec4899", EmotionCategory.POSITIVE),
    Emotion("confused", "Confused", 4, "#6b7280", EmotionCategory.NEUTRAL),
)


def normalize_day(value: date | datetime | str) -> date:
    """Return the calendar day for a date, datetime or ISO string."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Cannot normalize {type(value).__name__} to a day")


def count_words(content: str) -> int:
    """Whitespace-delimited word count; blank content counts as zero."""
    return len(content.split())


def new_entry_id() -> str:
    return f"entry-{uuid.uuid4().hex}"


def _dedupe(tags: list[str]) -> list[str]:
    if isinstance(tags, str):
        raise ValueError(f"Entry tags must be a list of strings, got {tags!r}")
    seen: dict[str, None] = {}
    for tag in tags:
        tag = str(tag).strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


@dataclass
class DiaryEntry:
    """One diary record for a calendar day.

    ``word_count`` is computed from ``content`` on every read and cannot
    be assigned. Use :meth:`with_changes` to produce a modified copy.
    """

    id: str
    day: date
    content: str = ""
    emotions: list[Emotion] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    writing_time: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    encrypted: bool = False

    def __post_init__(self):
        if not self.id:
            raise ValueError("Entry id must be non-empty")
        if not isinstance(self.content, str):
            raise ValueError("Entry content must be a string")
        self.day = normalize_day(self.day)
        self.tags = _dedupe(self.tags)
        self.emotions = list(self.emotions)

    @property
    def word_count(self) -> int:
        return count_words(self.content)

    @property
    def is_blank(self) -> bool:
        """True when there is nothing worth mirroring remotely."""
        return not self.content.strip()

    def with_changes(self, **changes: Any) -> DiaryEntry:
        """Return a copy with *changes* applied and derived fields recomputed."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.day.isoformat(),
            "content": self.content,
            "emotions": [e.to_dict() for e in self.emotions],
            "tags": list(self.tags),
            "wordCount": self.word_count,
            "writingTime": self.writing_time,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "encrypted": self.encrypted,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiaryEntry:
        """Rebuild an entry from :meth:`to_dict` output.

        The stored ``wordCount`` is ignored and recomputed from content.
        """
        created_at = datetime.fromisoformat(data["createdAt"])
        return cls(
            id=data["id"],
            day=normalize_day(data.get("date") or created_at),
            content=data.get("content") or "",
            emotions=[Emotion.from_dict(e) for e in data.get("emotions") or []],
            tags=list(data.get("tags") or []),
            writing_time=int(data.get("writingTime") or 0),
            created_at=created_at,
            updated_at=datetime.fromisoformat(data.get("updatedAt") or data["createdAt"]),
            encrypted=bool(data.get("encrypted", False)),
        )

    def __repr__(self) -> str:
        preview = self.content[:40] + "..." if len(self.content) > 40 else self.content
        return f"DiaryEntry(id='{self.id}', day={self.day.isoformat()}, words={self.word_count}, content='{preview}')"
