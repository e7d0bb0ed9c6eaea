"""Tests for scored, filtered entry search."""

from datetime import date

import pytest

from quill.journal.search import (
    CONTENT_SCORE,
    DATE_SCORE,
    EMOTION_SCORE,
    TAG_SCORE,
    DateRange,
    LengthBand,
    SearchFilters,
    SortBy,
    format_long_date,
    score_entry,
    search,
)


def words(n: int) -> str:
    return " ".join(["word"] * n)


class TestScoring:
    def test_content_match(self, make_entry):
        score, matched = score_entry(make_entry(0, "Went hiking in the hills"), "hiking")
        assert score == CONTENT_SCORE
        assert "hiking" in matched

    def test_fields_accumulate(self, make_entry, make_emotion):
        entry = make_entry(0, "happy day", tags=["happy-place"], emotions=[make_emotion("Happy")])
        score, _ = score_entry(entry, "HAPPY")
        assert score == CONTENT_SCORE + TAG_SCORE + EMOTION_SCORE

    def test_tag_only_match_reports_tags(self, make_entry):
        score, matched = score_entry(make_entry(0, "nothing", tags=["travel"]), "trav")
        assert score == TAG_SCORE
        assert matched == "Tags: travel"

    def test_date_match(self, make_entry):
        score, matched = score_entry(make_entry(0, "nothing"), "october")
        assert score == DATE_SCORE
        assert matched == "Written on October 19, 2026"

    def test_no_match(self, make_entry):
        assert score_entry(make_entry(0, "nothing"), "zebra") == (0, "")

    def test_long_content_snippet_is_trimmed(self, make_entry):
        content = words(40) + " needle " + words(40)
        _, matched = score_entry(make_entry(0, content), "needle")
        assert matched.startswith("...")
        assert matched.endswith("...")
        assert "needle" in matched


class TestSearch:
    @pytest.fixture
    def entries(self, make_entry, make_emotion):
        return [
            make_entry(0, "coffee " + words(10), emotions=[make_emotion("Calm")]),
            make_entry(3, "coffee " + words(200), tags=["coffee"]),
            make_entry(20, "coffee " + words(600)),
            make_entry(200, "coffee with an old friend"),
        ]

    def test_blank_query_returns_nothing(self, entries, now):
        assert search(entries, SearchFilters(query="   "), now) == []

    def test_relevance_order(self, entries, now):
        hits = search(entries, SearchFilters(query="coffee"), now)
        assert len(hits) == 4
        assert hits[0].score == CONTENT_SCORE + TAG_SCORE

    @pytest.mark.parametrize(
        "date_range, expected",
        [(DateRange.WEEK, 2), (DateRange.MONTH, 3), (DateRange.YEAR, 4), (DateRange.ALL, 4)],
    )
    def test_date_range(self, entries, now, date_range, expected):
        assert len(search(entries, SearchFilters(query="coffee", date_range=date_range), now)) == expected

    @pytest.mark.parametrize(
        "length, expected",
        [(LengthBand.SHORT, 2), (LengthBand.MEDIUM, 1), (LengthBand.LONG, 1)],
    )
    def test_length_band(self, entries, now, length, expected):
        assert len(search(entries, SearchFilters(query="coffee", length=length), now)) == expected

    def test_emotion_filter(self, entries, now):
        hits = search(entries, SearchFilters(query="coffee", emotions=["Calm"]), now)
        assert [h.entry.day for h in hits] == [date(2026, 10, 19)]

    def test_tag_filter(self, entries, now):
        hits = search(entries, SearchFilters(query="coffee", tags=["coffee"]), now)
        assert len(hits) == 1

    def test_sort_by_date_and_length(self, entries, now):
        by_date = search(entries, SearchFilters(query="coffee", sort_by=SortBy.DATE), now)
        assert [h.entry.day for h in by_date] == sorted((e.day for e in entries), reverse=True)

        by_words = search(entries, SearchFilters(query="coffee", sort_by=SortBy.WORD_COUNT), now)
        assert by_words[0].entry.word_count == 601


def test_format_long_date():
    assert format_long_date(date(2026, 3, 5)) == "March 5, 2026"
