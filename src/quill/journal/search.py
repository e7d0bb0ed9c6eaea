"""Filtered, scored search over diary entries.

:meth:`EntryStore.search_entries` is the plain substring match. This
module adds the search page's extras on top: a relevance score, a
snippet of what matched, age and length filters, emotion and tag
filters, and a choice of sort order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import StrEnum

from .models import DiaryEntry

CONTENT_SCORE = 10
TAG_SCORE = 7
EMOTION_SCORE = 5
DATE_SCORE = 3

SNIPPET_RADIUS = 50


class DateRange(StrEnum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def max_age(self) -> timedelta | None:
        return {
            DateRange.WEEK: timedelta(days=7),
            DateRange.MONTH: timedelta(days=30),
            DateRange.YEAR: timedelta(days=365),
        }.get(self)


class LengthBand(StrEnum):
    ALL = "all"
    SHORT = "short"  # under 100 words
    MEDIUM = "medium"  # 100-499
    LONG = "long"  # 500+

    def contains(self, words: int) -> bool:
        if self is LengthBand.SHORT:
            return words < 100
        if self is LengthBand.MEDIUM:
            return 100 <= words < 500
        if self is LengthBand.LONG:
            return words >= 500
        return True


class SortBy(StrEnum):
    RELEVANCE = "relevance"
    DATE = "date"
    WORD_COUNT = "word_count"


@dataclass
class SearchFilters:
    """What to search for and how to narrow it down.

    Attributes:
        query: Case-insensitive text to look for.
        date_range: Only entries at most this old.
        length: Only entries in this word-count band.
        emotions: Keep entries carrying at least one of these emotion names.
        tags: Keep entries carrying at least one of these tags.
        sort_by: Result order.
    """

    query: str = ""
    date_range: DateRange = DateRange.ALL
    length: LengthBand = LengthBand.ALL
    emotions: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    sort_by: SortBy = SortBy.RELEVANCE


@dataclass
class SearchHit:
    entry: DiaryEntry
    score: int
    matched_text: str

    def __repr__(self) -> str:
        return f"SearchHit(id='{self.entry.id}', score={self.score})"


def format_long_date(day: date) -> str:
    """``October 19, 2026`` — the way dates are searched and displayed."""
    return f"{day:%B} {day.day}, {day.year}"


def _snippet(content: str, index: int, length: int) -> str:
    start = max(0, index - SNIPPET_RADIUS)
    end = min(len(content), index + length + SNIPPET_RADIUS)
    text = content[start:end].strip()
    return ("..." if start > 0 else "") + text + ("..." if end < len(content) else "")


def score_entry(entry: DiaryEntry, query: str) -> tuple[int, str]:
    """Relevance score and snippet for one entry. A score of 0 means no match."""
    needle = query.lower()
    score = 0
    matched = ""

    index = entry.content.lower().find(needle)
    if index >= 0:
        score += CONTENT_SCORE
        matched = _snippet(entry.content, index, len(needle))

    matching_tags = [t for t in entry.tags if needle in t.lower()]
    if matching_tags:
        score += TAG_SCORE
        matched = matched or f"Tags: {', '.join(matching_tags)}"

    if any(needle in e.name.lower() for e in entry.emotions):
        score += EMOTION_SCORE
        matched = matched or f"Emotions: {', '.join(e.name for e in entry.emotions)}"

    long_date = format_long_date(entry.day)
    if needle in long_date.lower():
        score += DATE_SCORE
        matched = matched or f"Written on {long_date}"

    return score, matched


def _passes(entry: DiaryEntry, filters: SearchFilters, now: datetime) -> bool:
    max_age = filters.date_range.max_age
    if max_age is not None and now - datetime.combine(entry.day, datetime.min.time()) > max_age:
        return False
    if not filters.length.contains(entry.word_count):
        return False
    if filters.emotions and not any(e.name in filters.emotions for e in entry.emotions):
        return False
    if filters.tags and not any(t in filters.tags for t in entry.tags):
        return False
    return True


def search(
    entries: Iterable[DiaryEntry],
    filters: SearchFilters,
    now: datetime | None = None,
) -> list[SearchHit]:
    """Score and filter *entries*. A blank query returns nothing."""
    query = filters.query.strip()
    if not query:
        return []
    now = now or datetime.now()

    hits = []
    for entry in entries:
        score, matched = score_entry(entry, query)
        if score == 0 or not _passes(entry, filters, now):
            continue
        preview = entry.content[:100] + ("..." if len(entry.content) > 100 else "")
        hits.append(SearchHit(entry=entry, score=score, matched_text=matched or preview))

    if filters.sort_by is SortBy.DATE:
        hits.sort(key=lambda h: h.entry.day, reverse=True)
    elif filters.sort_by is SortBy.WORD_COUNT:
        hits.sort(key=lambda h: h.entry.word_count, reverse=True)
    else:
        hits.sort(key=lambda h: h.score, reverse=True)
    return hits
