"""Derived writing analytics.

Every function here is a pure derivation over the full entry collection
and a reference "now": nothing is cached, so callers may recompute on
every change or memoize as they like.

- :func:`time_of_day_distribution`: when entries get started
- :func:`emotion_frequency`: which emotions come up most
- :func:`weekly_rollup`: entries and words per calendar week
- :func:`daily_word_counts`: zero-filled daily series for the heatmap
- :func:`summary_statistics`: totals and averages
- :func:`emotion_trends`: per-emotion intensity and whether it is rising
- :func:`mood_timeline`: daily mood score and dominant emotion
"""

from __future__ import annotations

import calendar
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum, StrEnum

from .models import DiaryEntry, Emotion, EmotionCategory
from .streaks import round_half_up, writing_days

WEEKLY_LOOKBACK_DAYS = 90
HEATMAP_DAYS = 90
EMOTION_TOP_N = 10
MOOD_TIMELINE_DAYS = 30
TREND_THRESHOLD = 0.5
SUNDAY = 6


class HeatmapBucket(Enum):
    """Word-count intensity tier for one heatmap cell: (level, min words, label)."""

    NONE = (0, 0, "no entry")
    LOW = (1, 1, "1-49")
    MEDIUM = (2, 50, "50-149")
    HIGH = (3, 150, "150-299")
    VERY_HIGH = (4, 300, "300-499")
    MAX = (5, 500, "500+")

    @property
    def level(self) -> int:
        return self.value[0]

    @property
    def min_words(self) -> int:
        return self.value[1]

    @property
    def label(self) -> str:
        return self.value[2]


def heatmap_bucket(words: int) -> HeatmapBucket:
    """Map a day's word total to its heatmap tier (lower bounds inclusive)."""
    bucket = HeatmapBucket.NONE
    for candidate in HeatmapBucket:
        if words >= candidate.min_words:
            bucket = candidate
    return bucket


@dataclass(frozen=True)
class HourBucket:
    hour: int
    count: int
    percentage: float


@dataclass(frozen=True)
class EmotionShare:
    emotion: str
    count: int
    percentage: float


@dataclass(frozen=True)
class WeekBucket:
    week_start: date
    label: str
    entries: int
    words: int


@dataclass(frozen=True)
class DayPoint:
    day: date
    words: int
    bucket: HeatmapBucket


@dataclass(frozen=True)
class WritingSummary:
    """Headline numbers for the analytics dashboard.

    Averages are rounded half-up and are 0 when there is nothing to average.
    """

    total_entries: int = 0
    total_words: int = 0
    average_words_per_entry: int = 0
    longest_entry: int = 0
    writing_days: int = 0
    average_words_per_day: int = 0


def time_of_day_distribution(entries: Iterable[DiaryEntry]) -> list[HourBucket]:
    """Entry counts per hour of ``created_at``, busiest hour first."""
    hours = Counter(e.created_at.hour for e in entries)
    total = sum(hours.values())
    if not total:
        return []
    buckets = [HourBucket(hour=h, count=c, percentage=c / total * 100) for h, c in hours.items()]
    return sorted(buckets, key=lambda b: (-b.count, b.hour))


def emotion_frequency(entries: Iterable[DiaryEntry], top_n: int = EMOTION_TOP_N) -> list[EmotionShare]:
    """Most frequent emotion names as a share of all emotion tags (not of entries)."""
    counts = Counter(emotion.name for e in entries for emotion in e.emotions)
    total = sum(counts.values())
    if not total:
        return []
    return [
        EmotionShare(emotion=name, count=count, percentage=count / total * 100)
        for name, count in counts.most_common(top_n)
    ]


def _week_start(day: date, first_weekday: int) -> date:
    return day - timedelta(days=(day.weekday() - first_weekday) % 7)


def weekly_rollup(
    entries: Iterable[DiaryEntry],
    now: datetime | date | None = None,
    *,
    first_weekday: int = SUNDAY,
    lookback_days: int = WEEKLY_LOOKBACK_DAYS,
) -> list[WeekBucket]:
    """Entries and words per calendar week over roughly the last three months.

    Covers every week touching the span from the first of the month
    *lookback_days* ago to the last day of the current month, oldest first.
    """
    today = _as_day(now)
    window_start = (today - timedelta(days=lookback_days)).replace(day=1)
    window_end = today.replace(day=calendar.monthrange(today.year, today.month)[1])

    counts: Counter[date] = Counter()
    words: Counter[date] = Counter()
    for e in entries:
        week = _week_start(e.day, first_weekday)
        counts[week] += 1
        words[week] += e.word_count

    weeks = []
    week = _week_start(window_start, first_weekday)
    while week <= window_end:
        weeks.append(
            WeekBucket(
                week_start=week,
                label=f"{week:%b} {week.day}",
                entries=counts[week],
                words=words[week],
            )
        )
        week += timedelta(days=7)
    return weeks


def daily_word_counts(
    entries: Iterable[DiaryEntry],
    now: datetime | date | None = None,
    days: int = HEATMAP_DAYS,
) -> list[DayPoint]:
    """One point per day from ``today - days`` through today, oldest first.

    Days without entries are included with zero words.
    """
    today = _as_day(now)
    words: Counter[date] = Counter()
    for e in entries:
        words[e.day] += e.word_count

    points = []
    for offset in range(days, -1, -1):
        day = today - timedelta(days=offset)
        points.append(DayPoint(day=day, words=words[day], bucket=heatmap_bucket(words[day])))
    return points


def summary_statistics(entries: Iterable[DiaryEntry]) -> WritingSummary:
    entries = list(entries)
    if not entries:
        return WritingSummary()

    total_words = sum(e.word_count for e in entries)
    day_count = len(writing_days(entries))
    return WritingSummary(
        total_entries=len(entries),
        total_words=total_words,
        average_words_per_entry=round_half_up(total_words / len(entries)),
        longest_entry=max(e.word_count for e in entries),
        writing_days=day_count,
        average_words_per_day=round_half_up(total_words / day_count),
    )


class MoodTrend(StrEnum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(frozen=True)
class EmotionTrend:
    emotion: str
    color: str
    category: EmotionCategory
    frequency: int
    average_intensity: float
    trend: MoodTrend


@dataclass(frozen=True)
class MoodPoint:
    """One day of the mood timeline.

    ``mood_score`` runs from -10 to 10: positive emotions add their
    intensity, negative ones subtract it, neutral ones add nothing, and
    the sum is averaged over the day's emotions.
    """

    day: date
    mood_score: float
    dominant_emotion: str | None
    has_entry: bool


_MOOD_SIGN = {EmotionCategory.POSITIVE: 1, EmotionCategory.NEGATIVE: -1, EmotionCategory.NEUTRAL: 0}


def _mean(values: list[int]) -> float:
    return sum(values) / len(values)


def emotion_trends(entries: Iterable[DiaryEntry], threshold: float = TREND_THRESHOLD) -> list[EmotionTrend]:
    """Average intensity per emotion name and its direction over time.

    Each emotion's intensities are taken oldest first and split in two;
    the later half (the larger one when the count is odd) is compared with
    the earlier half. A gap wider than *threshold* is a trend. Most
    frequent emotions come first.
    """
    intensities: dict[str, list[int]] = {}
    first_seen: dict[str, Emotion] = {}
    for entry in sorted(entries, key=lambda e: (e.day, e.created_at)):
        for emotion in entry.emotions:
            first_seen.setdefault(emotion.name, emotion)
            intensities.setdefault(emotion.name, []).append(emotion.intensity)

    trends = []
    for name, values in intensities.items():
        half = len(values) // 2
        recent = _mean(values[half:])
        older = _mean(values[:half]) if half else recent
        difference = recent - older
        if abs(difference) > threshold:
            trend = MoodTrend.INCREASING if difference > 0 else MoodTrend.DECREASING
        else:
            trend = MoodTrend.STABLE
        trends.append(
            EmotionTrend(
                emotion=name,
                color=first_seen[name].color,
                category=first_seen[name].category,
                frequency=len(values),
                average_intensity=_mean(values),
                trend=trend,
            )
        )
    return sorted(trends, key=lambda t: (-t.frequency, t.emotion))


def mood_timeline(
    entries: Iterable[DiaryEntry],
    now: datetime | date | None = None,
    days: int = MOOD_TIMELINE_DAYS,
) -> list[MoodPoint]:
    """One :class:`MoodPoint` per day for the *days* days ending today, oldest first.

    The dominant emotion is the most intense one logged that day; the
    first logged wins a tie.
    """
    today = _as_day(now)
    by_day: dict[date, list[Emotion]] = {}
    written: set[date] = set()
    for entry in sorted(entries, key=lambda e: (e.day, e.created_at)):
        written.add(entry.day)
        by_day.setdefault(entry.day, []).extend(entry.emotions)

    points = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        emotions = by_day.get(day, [])
        score = _mean([e.intensity * _MOOD_SIGN[e.category] for e in emotions]) if emotions else 0.0
        dominant = max(emotions, key=lambda e: e.intensity).name if emotions else None
        points.append(MoodPoint(day=day, mood_score=score, dominant_emotion=dominant, has_entry=day in written))
    return points


def _as_day(now: datetime | date | None) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now
