"""Diary export to plain text and JSON.

Exports are oldest-first and can be narrowed to the past year, the past
month, or a custom day range. Statistics reuse
:func:`~quill.journal.analytics.summary_statistics`, so an empty export
reports zeros rather than dividing by zero.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from enum import StrEnum
from typing import Any

from .analytics import summary_statistics
from .models import DiaryEntry
from .search import format_long_date

RULE = "=" * 50


class ExportRange(StrEnum):
    ALL = "all"
    YEAR = "year"
    MONTH = "month"
    CUSTOM = "custom"


class ExportFormat(StrEnum):
    TEXT = "txt"
    JSON = "json"


def select_entries(
    entries: Iterable[DiaryEntry],
    date_range: ExportRange = ExportRange.ALL,
    now: datetime | None = None,
    start: date | None = None,
    end: date | None = None,
) -> list[DiaryEntry]:
    """Entries in *date_range*, sorted oldest-first.

    ``YEAR`` and ``MONTH`` mean the last 365 and 30 days. ``CUSTOM`` uses
    *start* and *end* (inclusive, either may be omitted).
    """
    today = (now or datetime.now()).date()
    selected = list(entries)
    if date_range is ExportRange.YEAR:
        start, end = today - timedelta(days=365), None
    elif date_range is ExportRange.MONTH:
        start, end = today - timedelta(days=30), None
    elif date_range is ExportRange.ALL:
        start = end = None

    if start is not None:
        selected = [e for e in selected if e.day >= start]
    if end is not None:
        selected = [e for e in selected if e.day <= end]
    return sorted(selected, key=lambda e: (e.day, e.created_at))


def _format_time(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    return f"{hour}:{moment:%M} {'AM' if moment.hour < 12 else 'PM'}"


def export_text(
    entries: list[DiaryEntry],
    *,
    include_emotions: bool = True,
    include_stats: bool = False,
    now: datetime | None = None,
) -> str:
    now = now or datetime.now()
    lines = [
        "Quill Export",
        "============",
        "",
        f"Exported on: {format_long_date(now.date())}",
        f"Total entries: {len(entries)}",
        "",
    ]

    if include_stats:
        stats = summary_statistics(entries)
        lines += [
            "Statistics:",
            "-----------",
            f"Total words: {stats.total_words:,}",
            f"Average words per entry: {stats.average_words_per_entry}",
        ]
        if entries:
            first, last = entries[0].day, entries[-1].day
            lines.append(f"Date range: {first:%b} {first.day}, {first.year} - {last:%b} {last.day}, {last.year}")
        lines.append("")

    for number, entry in enumerate(entries, start=1):
        lines.append(f"Entry {number}")
        lines.append(f"Date: {format_long_date(entry.day)} • {_format_time(entry.created_at)}")
        lines.append(f"Words: {entry.word_count}")
        if include_emotions and entry.emotions:
            lines.append(f"Emotions: {', '.join(e.name for e in entry.emotions)}")
        if entry.tags:
            lines.append(f"Tags: {', '.join(entry.tags)}")
        lines += ["", entry.content or "(Empty entry)", "", RULE, ""]

    return "\n".join(lines)


def export_json(
    entries: list[DiaryEntry],
    *,
    include_emotions: bool = True,
    include_stats: bool = False,
    now: datetime | None = None,
) -> str:
    now = now or datetime.now()
    records = []
    for entry in entries:
        record = entry.to_dict()
        if not include_emotions:
            record["emotions"] = []
        records.append(record)

    data: dict[str, Any] = {
        "exportDate": now.isoformat(),
        "totalEntries": len(entries),
        "dateRange": {
            "start": entries[0].day.isoformat() if entries else None,
            "end": entries[-1].day.isoformat() if entries else None,
        },
        "entries": records,
    }
    if include_stats:
        stats = summary_statistics(entries)
        data["statistics"] = {
            "totalWords": stats.total_words,
            "averageWordsPerEntry": stats.average_words_per_entry,
            "longestEntry": stats.longest_entry,
            "writingDays": stats.writing_days,
        }
    return json.dumps(data, indent=2, ensure_ascii=False)


def export_entries(
    entries: list[DiaryEntry],
    fmt: ExportFormat = ExportFormat.TEXT,
    **options: Any,
) -> str:
    if fmt is ExportFormat.JSON:
        return export_json(entries, **options)
    return export_text(entries, **options)


def default_filename(fmt: ExportFormat, now: datetime | None = None) -> str:
    return f"diary-export-{(now or datetime.now()):%Y-%m-%d}.{fmt.value}"
