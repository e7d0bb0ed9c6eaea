"""Tests for derived writing analytics."""

from datetime import date, timedelta

import pytest

from quill.journal.analytics import (
    HeatmapBucket,
    MoodTrend,
    WritingSummary,
    daily_word_counts,
    emotion_frequency,
    emotion_trends,
    heatmap_bucket,
    mood_timeline,
    summary_statistics,
    time_of_day_distribution,
    weekly_rollup,
)
from quill.journal.models import EmotionCategory


def words(n: int) -> str:
    return " ".join(["word"] * n)


class TestHeatmapBucket:
    @pytest.mark.parametrize(
        "count, expected",
        [
            (0, HeatmapBucket.NONE),
            (1, HeatmapBucket.LOW),
            (49, HeatmapBucket.LOW),
            (50, HeatmapBucket.MEDIUM),
            (149, HeatmapBucket.MEDIUM),
            (150, HeatmapBucket.HIGH),
            (299, HeatmapBucket.HIGH),
            (300, HeatmapBucket.VERY_HIGH),
            (499, HeatmapBucket.VERY_HIGH),
            (500, HeatmapBucket.MAX),
            (12000, HeatmapBucket.MAX),
        ],
    )
    def test_boundaries(self, count, expected):
        assert heatmap_bucket(count) is expected

    def test_levels_are_ordered(self):
        assert [b.level for b in HeatmapBucket] == [0, 1, 2, 3, 4, 5]


class TestTimeOfDay:
    def test_busiest_hour_first(self, make_entry):
        entries = [make_entry(0, hour=21), make_entry(1, hour=7), make_entry(2, hour=21), make_entry(3, hour=13)]
        buckets = time_of_day_distribution(entries)

        assert buckets[0].hour == 21
        assert buckets[0].count == 2
        assert buckets[0].percentage == pytest.approx(50.0)
        # ties broken by hour
        assert [b.hour for b in buckets[1:]] == [7, 13]

    def test_empty(self):
        assert time_of_day_distribution([]) == []


class TestEmotionFrequency:
    def test_percentage_of_all_emotion_tags(self, make_entry, make_emotion):
        happy, calm = make_emotion("Happy"), make_emotion("Calm")
        entries = [
            make_entry(0, emotions=[happy, calm]),
            make_entry(1, emotions=[happy]),
            make_entry(2, emotions=[happy]),
            make_entry(3),
        ]
        shares = emotion_frequency(entries)

        assert [s.emotion for s in shares] == ["Happy", "Calm"]
        assert shares[0].count == 3
        assert shares[0].percentage == pytest.approx(75.0)
        assert shares[1].percentage == pytest.approx(25.0)

    def test_top_n(self, make_entry, make_emotion):
        entries = [make_entry(i, emotions=[make_emotion(f"E{i}")]) for i in range(15)]
        assert len(emotion_frequency(entries)) == 10
        assert len(emotion_frequency(entries, top_n=3)) == 3

    def test_no_emotions(self, make_entry):
        assert emotion_frequency([make_entry(0, "text")]) == []


class TestWeeklyRollup:
    def test_weeks_start_on_sunday_and_cover_window(self, now):
        weeks = weekly_rollup([], now)

        assert all(w.week_start.weekday() == 6 for w in weeks)
        # first of the month 90 days back is 2026-07-01 (a Wednesday)
        assert weeks[0].week_start == date(2026, 6, 28)
        assert weeks[-1].week_start <= date(2026, 10, 31) < weeks[-1].week_start + timedelta(days=7)
        assert weeks[0].label == "Jun 28"

    def test_counts_and_words_per_week(self, make_entry, now):
        entries = [make_entry(0, words(10)), make_entry(1, words(5)), make_entry(2, words(2))]
        weeks = {w.week_start: w for w in weekly_rollup(entries, now)}

        # 2026-10-19 is a Monday; its week starts Sunday the 18th
        this_week = weeks[date(2026, 10, 18)]
        assert this_week.entries == 2
        assert this_week.words == 15
        last_week = weeks[date(2026, 10, 11)]
        assert last_week.entries == 1
        assert last_week.words == 2

    def test_monday_weeks(self, now):
        weeks = weekly_rollup([], now, first_weekday=0)
        assert all(w.week_start.weekday() == 0 for w in weeks)


class TestDailyWordCounts:
    def test_default_window_has_ninety_one_points(self, now, today):
        points = daily_word_counts([], now)

        assert len(points) == 91
        assert points[0].day == today - timedelta(days=90)
        assert points[-1].day == today

    def test_zero_fill_and_same_day_sum(self, make_entry, now):
        entries = [make_entry(0, words(30), hour=8), make_entry(0, words(30), hour=20), make_entry(2, words(3))]
        points = daily_word_counts(entries, now, days=6)

        assert [p.words for p in points] == [0, 0, 0, 0, 3, 0, 60]
        assert points[-1].bucket is HeatmapBucket.MEDIUM
        assert points[0].bucket is HeatmapBucket.NONE

    def test_entries_outside_window_ignored(self, make_entry, now):
        points = daily_word_counts([make_entry(200, words(10))], now, days=30)
        assert sum(p.words for p in points) == 0


class TestSummaryStatistics:
    def test_empty_is_all_zero(self):
        assert summary_statistics([]) == WritingSummary()

    def test_totals_and_rounded_averages(self, make_entry):
        entries = [make_entry(0, words(3), hour=8), make_entry(0, words(4), hour=20), make_entry(1, words(0))]
        stats = summary_statistics(entries)

        assert stats.total_entries == 3
        assert stats.total_words == 7
        assert stats.average_words_per_entry == 2
        assert stats.longest_entry == 4
        assert stats.writing_days == 2
        # 7 / 2 = 3.5 rounds half up
        assert stats.average_words_per_day == 4


class TestEmotionTrends:
    def test_rising_falling_and_steady(self, make_entry, make_emotion):
        entries = [
            make_entry(3, emotions=[make_emotion("Happy", intensity=3), make_emotion("Sad", intensity=8)]),
            make_entry(2, emotions=[make_emotion("Happy", intensity=4), make_emotion("Sad", intensity=7)]),
            make_entry(1, emotions=[make_emotion("Happy", intensity=8), make_emotion("Calm", intensity=5)]),
            make_entry(0, emotions=[make_emotion("Happy", intensity=9), make_emotion("Sad", intensity=2)]),
        ]
        trends = {t.emotion: t for t in emotion_trends(entries)}

        assert trends["Happy"].trend is MoodTrend.INCREASING
        assert trends["Happy"].average_intensity == pytest.approx(6.0)
        # Sad: older half [8], later half [7, 2]
        assert trends["Sad"].trend is MoodTrend.DECREASING
        assert trends["Calm"].trend is MoodTrend.STABLE

    def test_threshold_is_exclusive(self, make_entry, make_emotion):
        entries = [make_entry(1, emotions=[make_emotion("Calm", intensity=5)])]
        entries.append(make_entry(0, emotions=[make_emotion("Calm", intensity=5)]))
        entries.append(make_entry(2, emotions=[make_emotion("Calm", intensity=4)]))
        # oldest first: [4, 5, 5] -> older [4], later [5, 5]; gap 1.0
        assert emotion_trends(entries)[0].trend is MoodTrend.INCREASING
        assert emotion_trends(entries, threshold=1.0)[0].trend is MoodTrend.STABLE

    def test_input_order_does_not_matter(self, make_entry, make_emotion):
        entries = [make_entry(i, emotions=[make_emotion("Happy", intensity=10 - i)]) for i in range(4)]
        assert emotion_trends(entries) == emotion_trends(list(reversed(entries)))

    def test_most_frequent_first(self, make_entry, make_emotion):
        entries = [
            make_entry(0, emotions=[make_emotion("Calm"), make_emotion("Happy")]),
            make_entry(1, emotions=[make_emotion("Happy")]),
        ]
        trends = emotion_trends(entries)
        assert [t.emotion for t in trends] == ["Happy", "Calm"]
        assert trends[0].frequency == 2

    def test_empty(self):
        assert emotion_trends([]) == []


class TestMoodTimeline:
    def test_thirty_days_ending_today(self, now, today):
        points = mood_timeline([], now)
        assert len(points) == 30
        assert points[0].day == today - timedelta(days=29)
        assert points[-1].day == today
        assert all(p.mood_score == 0 and not p.has_entry for p in points)

    def test_score_and_dominant_emotion(self, make_entry, make_emotion):
        entry = make_entry(
            0,
            emotions=[
                make_emotion("Happy", EmotionCategory.POSITIVE, 8),
                make_emotion("Anxious", EmotionCategory.NEGATIVE, 4),
                make_emotion("Confused", EmotionCategory.NEUTRAL, 8),
            ],
        )
        point = mood_timeline([entry], entry.created_at)[-1]

        # (8 - 4 + 0) / 3
        assert point.mood_score == pytest.approx(4 / 3)
        assert point.dominant_emotion == "Happy"
        assert point.has_entry

    def test_entry_without_emotions(self, make_entry, now):
        point = mood_timeline([make_entry(0, "plain")], now)[-1]
        assert point.has_entry
        assert point.mood_score == 0
        assert point.dominant_emotion is None
