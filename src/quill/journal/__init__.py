"""Diary entries, their storage, and the analytics derived from them.

Provides the entry models, the EntryStore with write-through local
persistence and queued remote sync, streak and analytics calculators,
milestones, filtered search, and export.
"""

from .analytics import (
    HeatmapBucket,
    daily_word_counts,
    emotion_frequency,
    emotion_trends,
    heatmap_bucket,
    mood_timeline,
    summary_statistics,
    time_of_day_distribution,
    weekly_rollup,
)
from .config import AnalyticsConfig, SyncConfig
from .models import DEFAULT_EMOTIONS, DiaryEntry, Emotion, EmotionCategory, count_words, normalize_day
from .persistence import EntryRepository, LocalEntryRepository, MemoryEntryRepository
from .store import EntryStore
from .streaks import StreakInfo, calculate_streaks, current_streak, longest_streak
from .sync import HttpRemoteSync, NullRemoteSync, RemoteSync, SyncQueue

__all__ = [
    "DEFAULT_EMOTIONS",
    "AnalyticsConfig",
    "DiaryEntry",
    "Emotion",
    "EmotionCategory",
    "EntryRepository",
    "EntryStore",
    "HeatmapBucket",
    "HttpRemoteSync",
    "LocalEntryRepository",
    "MemoryEntryRepository",
    "NullRemoteSync",
    "RemoteSync",
    "StreakInfo",
    "SyncConfig",
    "SyncQueue",
    "calculate_streaks",
    "count_words",
    "current_streak",
    "daily_word_counts",
    "emotion_frequency",
    "emotion_trends",
    "heatmap_bucket",
    "longest_streak",
    "mood_timeline",
    "normalize_day",
    "summary_statistics",
    "time_of_day_distribution",
    "weekly_rollup",
]
