"""Tests for normalizers/field_names.py."""

from __future__ import annotations

import pytest

from contracts.match_record import MatchRecord
from normalizers.field_names import (
    canonical_label,
    deduplicate_column_keys,
    deduplicate_record,
    normalize_label,
)


class TestNormalizeLabel:
    """Tests for normalize_label."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("shots_against", "Shots Against"),
            ("goals_for", "Goals For"),
            ("goalsFor", "Goals For"),
            ("shotsAgainst", "Shots Against"),
            ("Goals For", "Goals For"),
            ("possession", "possession"),
            ("xG", "xG"),
        ],
    )
    def test_known_shapes(self, raw, expected):
        assert normalize_label(raw) == expected

    def test_empty_segments_dropped(self):
        assert normalize_label("__corners__won_") == "Corners Won"

    def test_whitespace_tidied(self):
        assert normalize_label("  Goals   For ") == "Goals For"

    @pytest.mark.parametrize("raw,expected", [("goalsFor_", "Goals For"), ("_goalsFor", "Goals For"), ("_BFor", "B For")])
    def test_single_snake_segment_gets_camel_split(self, raw, expected):
        assert normalize_label(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "shots_against",
            "goalsFor",
            "Home/Away",
            "big_chances_created",
            "x",
            "goalsFor_",
            "_goalsFor",
            "_BFor",
            " _oForAAo",
            "_xG",
            "_",
        ],
    )
    def test_idempotent(self, raw):
        once = normalize_label(raw)
        assert normalize_label(once) == once

    def test_empty_label(self):
        assert normalize_label("") == ""


class TestCanonicalLabel:
    def test_alias_resolves_to_canonical(self):
        assert canonical_label("match_id") == "Match ID"
        assert canonical_label("matchDate") == "Date"
        assert canonical_label("opponent") == "Opponent"

    def test_other_labels_are_normalized(self):
        assert canonical_label("goalsFor") == "Goals For"


class TestDeduplicateRecord:
    def test_alias_fields_fold_into_one(self):
        record = MatchRecord({"opponent": "Rovers", "Goals For": 2})
        deduped = deduplicate_record(record)
        assert deduped.to_dict() == {"Opponent": "Rovers", "Goals For": 2}

    def test_present_value_beats_blank(self):
        record = MatchRecord({"goals_for": None, "goalsFor": 3})
        assert deduplicate_record(record).get("Goals For") == 3

    def test_canonical_spelling_wins_over_alias(self):
        record = MatchRecord({"opponent_name": "Old", "Opponent": "New"})
        assert deduplicate_record(record).get("Opponent") == "New"


class TestDeduplicateColumnKeys:
    def test_union_is_sorted_and_canonical(self):
        records = [
            MatchRecord({"Goals For": 1, "Date": "01/15/2025"}),
            MatchRecord({"goalsFor": 2, "match_date": "01/16/2025", "shots_against": 4}),
        ]
        assert deduplicate_column_keys(records) == ["Date", "Goals For", "Shots Against"]

    def test_no_records(self):
        assert deduplicate_column_keys([]) == []
