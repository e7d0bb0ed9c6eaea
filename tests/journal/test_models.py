"""Tests for journal data models."""

from datetime import date, datetime

import pytest

from quill.journal.models import (
    DEFAULT_EMOTIONS,
    DiaryEntry,
    Emotion,
    EmotionCategory,
    count_words,
    new_entry_id,
    normalize_day,
)


class TestEmotion:
    def test_defaults(self):
        e = Emotion(id="happy", name="Happy")
        assert e.intensity == 5
        assert e.category is EmotionCategory.NEUTRAL
        assert e.custom is False

    @pytest.mark.parametrize("intensity", [0, 11, -1])
    def test_intensity_out_of_range(self, intensity):
        with pytest.raises(ValueError, match="intensity"):
            Emotion(id="x", name="X", intensity=intensity)

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            Emotion(id="x", name="")

    def test_category_string_coerced(self):
        assert Emotion(id="x", name="X", category="positive").category is EmotionCategory.POSITIVE

    def test_from_dict_derives_id_from_name(self):
        e = Emotion.from_dict({"name": "Grateful", "intensity": 8, "category": "positive"})
        assert e.id == "grateful"
        assert e.intensity == 8

    def test_compared_by_value(self):
        assert Emotion(id="a", name="A") == Emotion(id="a", name="A")

    def test_default_palette(self):
        assert len(DEFAULT_EMOTIONS) == 8
        assert {e.category for e in DEFAULT_EMOTIONS} == set(EmotionCategory)


class TestHelpers:
    def test_count_words(self):
        assert count_words("") == 0
        assert count_words("   \n\t ") == 0
        assert count_words("one  two\nthree\tfour") == 4

    def test_normalize_day(self):
        assert normalize_day(datetime(2026, 10, 19, 23, 59)) == date(2026, 10, 19)
        assert normalize_day(date(2026, 10, 19)) == date(2026, 10, 19)
        assert normalize_day("2026-10-19") == date(2026, 10, 19)
        assert normalize_day("2026-10-19T08:15:00") == date(2026, 10, 19)

    def test_normalize_day_rejects_other_types(self):
        with pytest.raises(TypeError):
            normalize_day(20261019)

    def test_new_entry_id(self):
        assert new_entry_id().startswith("entry-")
        assert new_entry_id() != new_entry_id()


class TestDiaryEntry:
    def test_word_count_derived(self):
        entry = DiaryEntry(id="e1", day=date(2026, 10, 19), content="a quiet day")
        assert entry.word_count == 3

    def test_day_normalized_from_datetime(self):
        entry = DiaryEntry(id="e1", day=datetime(2026, 10, 19, 22, 0))
        assert entry.day == date(2026, 10, 19)

    def test_tags_deduplicated_in_order(self):
        entry = DiaryEntry(id="e1", day=date(2026, 10, 19), tags=["work", " work ", "", "home", "work"])
        assert entry.tags == ["work", "home"]

    def test_empty_id_rejected(self):
        with pytest.raises(ValueError):
            DiaryEntry(id="", day=date(2026, 10, 19))

    def test_is_blank(self):
        assert DiaryEntry(id="e1", day=date(2026, 10, 19), content="  \n").is_blank
        assert not DiaryEntry(id="e1", day=date(2026, 10, 19), content="x").is_blank

    def test_with_changes_recomputes_and_leaves_original(self):
        entry = DiaryEntry(id="e1", day=date(2026, 10, 19), content="one")
        changed = entry.with_changes(content="one two")

        assert changed.word_count == 2
        assert entry.word_count == 1
        assert changed.id == entry.id

    def test_dict_roundtrip(self, make_entry, make_emotion):
        entry = make_entry(0, "Long walk", emotions=[make_emotion("Calm", EmotionCategory.POSITIVE, 3)], tags=["out"])
        restored = DiaryEntry.from_dict(entry.to_dict())

        assert restored == entry
        assert isinstance(restored.day, date)
        assert isinstance(restored.created_at, datetime)

    def test_serialized_keys(self, make_entry):
        data = make_entry(0, "hi").to_dict()
        assert data["date"] == "2026-10-19"
        assert data["wordCount"] == 1
        assert set(data) >= {"id", "content", "emotions", "tags", "writingTime", "createdAt", "updatedAt", "encrypted"}

    def test_stored_word_count_ignored(self, make_entry):
        data = make_entry(0, "one two").to_dict()
        data["wordCount"] = 99
        assert DiaryEntry.from_dict(data).word_count == 2

    def test_missing_date_falls_back_to_created_at(self, make_entry):
        data = make_entry(0, "x", hour=9).to_dict()
        del data["date"]
        assert DiaryEntry.from_dict(data).day == date(2026, 10, 19)


class TestDerivedWordCount:
    def test_follows_content_edits(self):
        entry = DiaryEntry(id="e1", day=date(2026, 10, 19), content="one two")
        entry.content = "x"
        assert entry.word_count == 1
        assert entry.to_dict()["wordCount"] == 1

    def test_cannot_be_assigned(self):
        entry = DiaryEntry(id="e1", day=date(2026, 10, 19), content="one two")
        with pytest.raises(AttributeError):
            entry.word_count = 99
        assert entry.word_count == 2

    def test_not_a_constructor_argument(self):
        with pytest.raises(TypeError):
            DiaryEntry(id="e1", day=date(2026, 10, 19), word_count=5)

    def test_string_tags_rejected(self):
        with pytest.raises(ValueError, match="tags"):
            DiaryEntry(id="e1", day=date(2026, 10, 19), tags="work")
