"""Tests for store/merge_resolver.py."""

from __future__ import annotations

import logging

from contracts.match_record import MatchRecord
from store.merge_resolver import MergeResolver, merge_records


class TestMergePrecedence:
    def test_secondary_wins_on_collision(self):
        primary = [MatchRecord({"Match ID": "M1", "Date": "01/01/2024", "Opponent": "A", "Goals For": 1})]
        secondary = [MatchRecord({"Match ID": "M1", "Date": "01/01/2024", "Opponent": "A", "Goals For": 3})]

        merged = merge_records(primary, secondary)

        assert merged == [MatchRecord({"Match ID": "M1", "Date": "01/01/2024", "Opponent": "A", "Goals For": 3})]

    def test_primary_identity_survives_override(self):
        primary = [MatchRecord({"Match ID": "EXT-9", "Date": "01/01/2024", "Opponent": "A"})]
        secondary = [MatchRecord({"Match ID": "ext-9", "Date": "01/01/2024", "Opponent": "A", "Shots": 8})]

        merged = merge_records(primary, secondary)

        assert len(merged) == 1
        assert merged[0].get("Match ID") == "EXT-9"
        assert merged[0].get("Shots") == 8

    def test_identity_restored_on_alias_label(self):
        primary = [MatchRecord({"Match ID": "M5", "Date": "01/02/2024", "Opponent": "B"})]
        secondary = [MatchRecord({"match_id": "m5", "Date": "01/02/2024", "Opponent": "B"})]

        merged = merge_records(primary, secondary)

        assert merged[0].get("match_id") == "M5"
        assert "Match ID" not in merged[0]

    def test_secondary_identity_kept_when_primary_has_none(self):
        primary = [MatchRecord({"Date": "01/03/2024", "Opponent": "C", "Goals For": 1})]
        secondary = [MatchRecord({"Date": "01/03/2024", "Opponent": "C", "Goals For": 2})]

        merged = merge_records(primary, secondary)

        assert len(merged) == 1
        assert merged[0].get("Goals For") == 2

    def test_self_merge_is_idempotent(self):
        records = [
            MatchRecord({"Match ID": "M1", "Date": "01/01/2024", "Opponent": "A", "Goals For": 1}),
            MatchRecord({"Match ID": "M2", "Date": "02/01/2024", "Opponent": "B", "Goals For": 0}),
        ]
        merged = merge_records(records, records)
        assert sorted(merged, key=lambda r: r.get("Match ID")) == records


class TestMergeBookkeeping:
    def test_primary_duplicates_skipped_first_kept(self, caplog):
        primary = [
            MatchRecord({"Match ID": "M1", "Goals For": 1}),
            MatchRecord({"Match ID": "m1", "Goals For": 9}),
        ]
        with caplog.at_level(logging.INFO):
            result = MergeResolver().resolve(primary, [])

        assert [r.get("Goals For") for r in result.records] == [1]
        assert result.report.duplicates_skipped == 1
        assert any(getattr(rec, "event", None) == "merge_duplicate" for rec in caplog.records)

    def test_unkeyed_records_dropped_and_reported(self):
        orphan = MatchRecord({"Goals For": 5})
        result = MergeResolver().resolve([orphan], [MatchRecord({"Shots": 1})])

        assert result.records == []
        assert result.report.unkeyed_primary == [orphan]
        assert result.report.unkeyed_count == 2

    def test_counts(self):
        primary = [MatchRecord({"Match ID": "M1"}), MatchRecord({"Match ID": "M2"})]
        secondary = [MatchRecord({"Match ID": "M2"}), MatchRecord({"Match ID": "M3"})]

        report = MergeResolver().resolve(primary, secondary).report

        assert report.to_dict()["merged_count"] == 3
        assert report.overridden == 1
        assert report.primary_count == 2
        assert report.secondary_count == 2

    def test_empty_sides(self):
        assert merge_records([], []) == []
        only = [MatchRecord({"Match ID": "M1"})]
        assert merge_records(only, []) == only
        assert merge_records([], only) == only


class TestMergeOrdering:
    def test_descending_by_date_string(self):
        primary = [
            MatchRecord({"Match ID": "a", "Date": "01/05/2024"}),
            MatchRecord({"Match ID": "b", "Date": "03/01/2024"}),
        ]
        secondary = [MatchRecord({"Match ID": "c", "Date": "02/10/2024"})]

        merged = merge_records(primary, secondary)

        assert [r.get("Match ID") for r in merged] == ["b", "c", "a"]

    def test_undated_records_sort_last(self):
        merged = merge_records(
            [MatchRecord({"Match ID": "x"}), MatchRecord({"Match ID": "y", "Date": "01/01/2024"})],
            [],
        )
        assert [r.get("Match ID") for r in merged] == ["y", "x"]
