"""quill stats / heatmap / mood — writing habits at a glance."""

from __future__ import annotations

from datetime import datetime

import click

from quill.journal.analytics import (
    HeatmapBucket,
    MoodTrend,
    daily_word_counts,
    emotion_frequency,
    emotion_trends,
    mood_timeline,
    summary_statistics,
    time_of_day_distribution,
)
from quill.journal.config import AnalyticsConfig
from quill.journal.milestones import Progress, evaluate_milestones, next_milestone
from quill.journal.streaks import calculate_streaks

from .common import with_store

HEATMAP_GLYPHS = {
    HeatmapBucket.NONE: ".",
    HeatmapBucket.LOW: "-",
    HeatmapBucket.MEDIUM: "+",
    HeatmapBucket.HIGH: "*",
    HeatmapBucket.VERY_HIGH: "#",
    HeatmapBucket.MAX: "@",
}


def _hour_label(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


@click.command()
@click.pass_obj
def stats(config) -> None:
    """Totals, streaks, favourite emotions and writing hours."""
    analytics = AnalyticsConfig.from_config(config)

    async def _action(store):
        return list(store.entries)

    entries = with_store(config, _action)
    today = datetime.now().date()
    summary = summary_statistics(entries)
    streaks = calculate_streaks(entries, today, allow_grace_day=True)

    click.echo(f"Entries:          {summary.total_entries}")
    click.echo(f"Words:            {summary.total_words:,}")
    click.echo(f"Words per entry:  {summary.average_words_per_entry}")
    click.echo(f"Longest entry:    {summary.longest_entry}")
    click.echo(f"Writing days:     {summary.writing_days}")
    click.echo(f"Words per day:    {summary.average_words_per_day}")
    click.echo(f"Current streak:   {streaks.current}")
    click.echo(f"Longest streak:   {streaks.longest}")

    upcoming = next_milestone(evaluate_milestones(Progress.from_entries(entries, today)))
    if upcoming:
        click.echo(f"Next milestone:   {upcoming.title} ({upcoming.description})")

    top = emotion_frequency(entries, analytics.emotion_top_n)
    if top:
        click.echo("\nEmotions:")
        for share in top:
            click.echo(f"  {share.emotion:<16} {share.count:>4}  {share.percentage:5.1f}%")

    hours = time_of_day_distribution(entries)
    if hours:
        click.echo("\nWhen you write:")
        for bucket in hours[:5]:
            click.echo(f"  {_hour_label(bucket.hour):<6} {bucket.count:>4}  {bucket.percentage:5.1f}%")


@click.command()
@click.option("--days", type=int, default=None, help="How many days back to show.")
@click.pass_obj
def heatmap(config, days) -> None:
    """Daily word counts as a grid, one row per week."""
    window = days if days is not None else AnalyticsConfig.from_config(config).heatmap_days

    async def _action(store):
        return daily_word_counts(store.entries, datetime.now(), window)

    points = with_store(config, _action)
    for i in range(0, len(points), 7):
        week = points[i : i + 7]
        glyphs = " ".join(HEATMAP_GLYPHS[p.bucket] for p in week)
        click.echo(f"{week[0].day.isoformat()}  {glyphs}")
    legend = "  ".join(f"{HEATMAP_GLYPHS[b]} {b.label}" for b in HeatmapBucket)
    click.echo(f"\n{legend}")


TREND_ARROWS = {MoodTrend.INCREASING: "up", MoodTrend.DECREASING: "down", MoodTrend.STABLE: "steady"}


@click.command()
@click.option("--days", type=int, default=30, help="How many days of mood to show.")
@click.pass_obj
def mood(config, days) -> None:
    """Daily mood score and how each emotion is trending."""

    async def _action(store):
        return list(store.entries)

    entries = with_store(config, _action)
    for point in mood_timeline(entries, datetime.now(), days):
        if not point.has_entry:
            continue
        dominant = point.dominant_emotion or "-"
        click.echo(f"{point.day.isoformat()}  {point.mood_score:+5.1f}  {dominant}")

    trends = emotion_trends(entries)
    if not trends:
        click.echo("No emotions logged yet.")
        return
    click.echo("\nTrends:")
    for t in trends:
        click.echo(f"  {t.emotion:<16} x{t.frequency:<4} avg {t.average_intensity:4.1f}  {TREND_ARROWS[t.trend]}")
