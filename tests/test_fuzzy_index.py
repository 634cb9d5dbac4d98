"""Tests for FuzzyIndex: weighted approximate matching over cached records."""

from __future__ import annotations

from conftest import make_record

from cinelink_search.cache.fuzzy import (
    SEARCH_OPTIONS,
    SUGGESTION_OPTIONS,
    FuzzyIndex,
    field_similarity,
)

_RECORDS = [
    make_record("tt1375666", "Inception", year="2010"),
    make_record("tt0468569", "The Dark Knight", year="2008"),
    make_record("tt0372784", "Batman Begins", year="2005"),
    make_record("tt0816692", "Interstellar", year="2014"),
]


class TestFieldSimilarity:
    def test_substring_is_perfect(self):
        assert field_similarity("dark knight", "the dark knight") == 1.0

    def test_empty_is_zero(self):
        assert field_similarity("", "anything") == 0.0
        assert field_similarity("query", "") == 0.0

    def test_long_query_against_short_value_uses_full_ratio(self):
        # A query that merely contains the year should not fully match it
        assert field_similarity("2010 space odyssey", "2010") < 0.6

    def test_equal_length_values_use_full_ratio(self):
        assert field_similarity("2014", "2005") < 0.6
        assert field_similarity("2014", "2008") < 0.6
        assert field_similarity("2014", "2010") >= 0.6


class TestFuzzyIndex:
    def test_empty_index_returns_empty(self):
        assert FuzzyIndex([]).search("inception") == []

    def test_exact_title(self):
        results = FuzzyIndex(_RECORDS).search("inception")
        assert results[0]["id"] == "tt1375666"

    def test_case_insensitive(self):
        assert FuzzyIndex(_RECORDS).search("INCEPTION")[0]["id"] == "tt1375666"

    def test_typo_tolerance(self):
        results = FuzzyIndex(_RECORDS).search("incepton")
        assert [r["id"] for r in results][:1] == ["tt1375666"]

    def test_partial_title(self):
        ids = [r["id"] for r in FuzzyIndex(_RECORDS).search("dark knight")]
        assert "tt0468569" in ids

    def test_unrelated_query_has_no_match(self):
        assert FuzzyIndex(_RECORDS).search("zzzzqqqq") == []

    def test_year_field_matches(self):
        ids = [r["id"] for r in FuzzyIndex(_RECORDS).search("2014")]
        assert ids[0] == "tt0816692"
        assert "tt0372784" not in ids
        assert "tt0468569" not in ids

    def test_title_match_outranks_year_match(self):
        records = [
            make_record("year-hit", "Something Else", year="2012"),
            make_record("title-hit", "2012", year="2009"),
        ]
        ids = [r["id"] for r in FuzzyIndex(records).search("2012")]
        assert ids == ["title-hit", "year-hit"]

    def test_genre_field_used_when_present(self):
        rec = make_record("g1", "Quiet Place", year="2018")
        rec["genre"] = "Horror, Thriller"
        ids = [r["id"] for r in FuzzyIndex([rec]).search("horror")]
        assert ids == ["g1"]

    def test_limit(self):
        records = [make_record(f"s{i}", f"Star Wars {i}") for i in range(10)]
        assert len(FuzzyIndex(records).search("star wars", limit=3)) == 3

    def test_equal_scores_keep_insertion_order(self):
        records = [make_record(f"s{i}", f"Star Wars {i}", year="1977") for i in range(5)]
        ids = [r["id"] for r in FuzzyIndex(records).search("star wars")]
        assert ids == ["s0", "s1", "s2", "s3", "s4"]

    def test_search_min_match_length(self):
        # Search options need at least 2 characters
        assert FuzzyIndex(_RECORDS, SEARCH_OPTIONS).search("i") == []

    def test_suggestion_options_accept_single_char(self):
        assert FuzzyIndex(_RECORDS, SUGGESTION_OPTIONS).search("i") != []

    def test_scores_are_sorted_descending(self):
        scored = FuzzyIndex(_RECORDS).search_scored("batman")
        scores = [s for _, s in scored]
        assert scores == sorted(scores, reverse=True)
        assert all(0 < s <= 1 for s in scores)

    def test_index_is_snapshot(self):
        records = list(_RECORDS)
        index = FuzzyIndex(records)
        records.append(make_record("new", "Inception 2"))
        assert len(index) == len(_RECORDS)
