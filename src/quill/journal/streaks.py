"""Writing-streak calculations.

A streak is a run of consecutive calendar days with at least one entry.
Multiple entries on one day count once. All functions are pure: they
take the entry collection (in any order) and an optional "today".
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from .models import DiaryEntry

MAX_STREAK_LOOKBACK_DAYS = 366
CONSISTENCY_WINDOW_DAYS = 30

_ONE_DAY = timedelta(days=1)


@dataclass
class StreakInfo:
    """Streak summary for the streak tracker.

    Attributes:
        current: Consecutive days ending today (or yesterday with a grace day).
        longest: Longest run anywhere in the history.
        last_entry_date: Most recent day with an entry.
        streak_start_date: First day of the current streak, if any.
    """

    current: int = 0
    longest: int = 0
    last_entry_date: date | None = None
    streak_start_date: date | None = None


def writing_days(entries: Iterable[DiaryEntry]) -> set[date]:
    """Distinct days that have an entry."""
    return {e.day for e in entries}


def current_streak(
    entries: Iterable[DiaryEntry],
    today: date | None = None,
    *,
    allow_grace_day: bool = False,
) -> int:
    """Count consecutive days with entries walking back from *today*.

    Stops at the first missing day, or after ``MAX_STREAK_LOOKBACK_DAYS``.
    With *allow_grace_day*, an empty today does not break the streak, so a
    writer who hasn't written yet today keeps yesterday's count.
    """
    days = writing_days(entries)
    if not days:
        return 0

    check = today or date.today()
    if allow_grace_day and check not in days:
        check -= _ONE_DAY

    streak = 0
    while streak < MAX_STREAK_LOOKBACK_DAYS and check in days:
        streak += 1
        check -= _ONE_DAY
    return streak


def longest_streak(entries: Iterable[DiaryEntry]) -> int:
    """Longest run of consecutive days across the whole history."""
    ordered = sorted(writing_days(entries))
    if not ordered:
        return 0

    longest = run = 1
    for prev, cur in zip(ordered, ordered[1:]):
        if cur - prev == _ONE_DAY:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def consistency_score(
    entries: Iterable[DiaryEntry],
    today: date | None = None,
    window_days: int = CONSISTENCY_WINDOW_DAYS,
) -> int:
    """Percentage of the last *window_days* days with an entry (0-100)."""
    today = today or date.today()
    since = today - timedelta(days=window_days)
    recent = {d for d in writing_days(entries) if since <= d <= today}
    return min(100, round_half_up(len(recent) / window_days * 100))


def calculate_streaks(
    entries: Iterable[DiaryEntry],
    today: date | None = None,
    *,
    allow_grace_day: bool = False,
) -> StreakInfo:
    entries = list(entries)
    if not entries:
        return StreakInfo()

    today = today or date.today()
    current = current_streak(entries, today, allow_grace_day=allow_grace_day)
    days = writing_days(entries)
    last = max(days)

    start = None
    if current:
        end = today if today in days else today - _ONE_DAY
        start = end - timedelta(days=current - 1)

    return StreakInfo(
        current=current,
        longest=longest_streak(entries),
        last_entry_date=last,
        streak_start_date=start,
    )


def round_half_up(value: float) -> int:
    """Round halves up for non-negative values (2.5 -> 3, where round() gives 2)."""
    return int(value + 0.5)
