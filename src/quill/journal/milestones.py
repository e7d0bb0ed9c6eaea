"""Writing milestones.

A fixed catalogue of goals (streak length, entry count, total words,
30-day consistency). :func:`evaluate_milestones` scores progress against
it; :func:`newly_achieved` compares two evaluations so a caller can
celebrate exactly once.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import StrEnum

from .models import DiaryEntry
from .streaks import consistency_score, current_streak


class MilestoneCategory(StrEnum):
    STREAK = "streak"
    ENTRIES = "entries"
    WORDS = "words"
    CONSISTENCY = "consistency"


@dataclass(frozen=True)
class Milestone:
    id: str
    title: str
    description: str
    category: MilestoneCategory
    threshold: int
    achieved: bool = False
    achieved_at: datetime | None = None


@dataclass(frozen=True)
class Progress:
    """The numbers milestones are measured against."""

    current_streak: int = 0
    total_entries: int = 0
    total_words: int = 0
    consistency: int = 0

    @classmethod
    def from_entries(cls, entries: Iterable[DiaryEntry], today: date | None = None) -> Progress:
        entries = list(entries)
        return cls(
            current_streak=current_streak(entries, today, allow_grace_day=True),
            total_entries=len(entries),
            total_words=sum(e.word_count for e in entries),
            consistency=consistency_score(entries, today),
        )

    def value_for(self, category: MilestoneCategory) -> int:
        return {
            MilestoneCategory.STREAK: self.current_streak,
            MilestoneCategory.ENTRIES: self.total_entries,
            MilestoneCategory.WORDS: self.total_words,
            MilestoneCategory.CONSISTENCY: self.consistency,
        }[category]


MILESTONES: tuple[Milestone, ...] = (
    Milestone("streak-3", "Getting Started", "Write for 3 days in a row", MilestoneCategory.STREAK, 3),
    Milestone("streak-7", "Week Warrior", "Maintain a 7-day writing streak", MilestoneCategory.STREAK, 7),
    Milestone("streak-14", "Two Week Champion", "Write consistently for 2 weeks", MilestoneCategory.STREAK, 14),
    Milestone("streak-30", "Monthly Master", "Complete a 30-day writing streak", MilestoneCategory.STREAK, 30),
    Milestone("streak-100", "Century Club", "Achieve a 100-day writing streak", MilestoneCategory.STREAK, 100),
    Milestone("entries-10", "First Steps", "Write your first 10 entries", MilestoneCategory.ENTRIES, 10),
    Milestone("entries-50", "Prolific Writer", "Reach 50 diary entries", MilestoneCategory.ENTRIES, 50),
    Milestone("entries-100", "Century of Stories", "Write 100 diary entries", MilestoneCategory.ENTRIES, 100),
    Milestone("entries-365", "Year of Reflection", "Complete 365 diary entries", MilestoneCategory.ENTRIES, 365),
    Milestone("words-1000", "Thousand Words", "Write your first 1,000 words", MilestoneCategory.WORDS, 1000),
    Milestone("words-10000", "Ten Thousand Tales", "Reach 10,000 words written", MilestoneCategory.WORDS, 10000),
    Milestone("words-50000", "Novelist Level", "Write 50,000 words total", MilestoneCategory.WORDS, 50000),
    Milestone("words-100000", "Word Master", "Achieve 100,000 words written", MilestoneCategory.WORDS, 100000),
    Milestone("consistency-50", "Half Consistent", "Write on 50% of days this month", MilestoneCategory.CONSISTENCY, 50),
    Milestone(
        "consistency-75", "Highly Consistent", "Write on 75% of days this month", MilestoneCategory.CONSISTENCY, 75
    ),
    Milestone("consistency-90", "Almost Perfect", "Write on 90% of days this month", MilestoneCategory.CONSISTENCY, 90),
)


def evaluate_milestones(progress: Progress) -> list[Milestone]:
    """Return the catalogue with ``achieved`` set from *progress*."""
    return [replace(m, achieved=progress.value_for(m.category) >= m.threshold) for m in MILESTONES]


def newly_achieved(
    previous: Iterable[Milestone],
    current: Iterable[Milestone],
    now: datetime | None = None,
) -> list[Milestone]:
    """Milestones achieved in *current* but not in *previous*, stamped with *now*."""
    before = {m.id for m in previous if m.achieved}
    stamp = now or datetime.now()
    return [replace(m, achieved_at=stamp) for m in current if m.achieved and m.id not in before]


def next_milestone(milestones: Iterable[Milestone]) -> Milestone | None:
    """The unachieved milestone with the lowest threshold."""
    pending = [m for m in milestones if not m.achieved]
    return min(pending, key=lambda m: m.threshold, default=None)
