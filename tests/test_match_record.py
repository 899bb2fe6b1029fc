"""Tests for contracts/match_record.py."""

from __future__ import annotations

import math

from contracts.match_record import MatchRecord, canonical_for_alias, coerce_scalar, scalar_text


class TestScalars:
    def test_coerce(self):
        assert coerce_scalar("  ") is None
        assert coerce_scalar(math.nan) is None
        assert coerce_scalar(True) == 1
        assert coerce_scalar(0) == 0
        assert coerce_scalar(["a"]) == "['a']"

    def test_scalar_text(self):
        assert scalar_text(7.0) == "7"
        assert scalar_text(7.5) == "7.5"
        assert scalar_text(None) == ""

    def test_canonical_for_alias(self):
        assert canonical_for_alias("OPPONENT_NAME") == "Opponent"
        assert canonical_for_alias("Goals For") is None


class TestMatchRecord:
    def test_preserves_label_order(self):
        record = MatchRecord({"Shots": 1, "Date": "01/01/2024", "Opponent": "A"})
        assert record.labels == ["Shots", "Date", "Opponent"]

    def test_lookup_prefers_present_alias(self):
        record = MatchRecord({"Opponent": "", "opponent_name": "Rovers"})
        assert record.find_label("Opponent") == "opponent_name"
        assert record.lookup("Opponent") == "Rovers"

    def test_lookup_falls_back_to_blank_alias(self):
        record = MatchRecord({"opponent": None})
        assert record.find_label("Opponent") == "opponent"
        assert record.lookup("Opponent") is None

    def test_with_value_copies(self):
        record = MatchRecord({"Match ID": 1})
        updated = record.with_value("Match ID", "M-1")
        assert record.get("Match ID") == 1
        assert updated.get("Match ID") == "M-1"

    def test_dict_round_trip(self):
        payload = {"Match ID": "M1", "Goals For": 2, "Notes": None}
        assert MatchRecord.from_dict(payload).to_dict() == payload
