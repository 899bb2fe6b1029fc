"""Tests for filters/filters.py."""

from __future__ import annotations

import pytest

from contracts.chart_config import ChartFilters, DateRange
from contracts.match_record import MatchRecord
from filters.filters import filter_records, parse_season


@pytest.fixture
def records():
    return [
        MatchRecord({"Date": "01/10/2025", "Opponent": "FC River Plate", "Team": "U16 Boys", "Season": "2025"}),
        MatchRecord({"Date": "02/14/2025", "Opponent": "City", "Team": "U16 Boys (Club Night)", "Season": 2025}),
        MatchRecord({"Date": "09/01/2024", "Opponent": "Riverside", "Team": "U14 Girls", "Season": "2024/25"}),
        MatchRecord({"Date": "TBD", "Opponent": "United", "Team": "U14 Girls", "Season": None}),
    ]


def _opponents(records):
    return [r.get("Opponent") for r in records]


class TestSubstringFilters:
    def test_opponent_substring_case_insensitive(self):
        kept = filter_records([MatchRecord({"Opponent": "FC River Plate"})], ChartFilters(opponents=("river",)), "Date")
        assert len(kept) == 1

    def test_or_within_dimension(self, records):
        kept = filter_records(records, ChartFilters(opponents=("plate", "city")), "Date")
        assert _opponents(kept) == ["FC River Plate", "City"]

    def test_team_suffix_variants_match(self, records):
        kept = filter_records(records, ChartFilters(teams=("u16 boys",)), "Date")
        assert _opponents(kept) == ["FC River Plate", "City"]

    def test_and_across_dimensions(self, records):
        kept = filter_records(records, ChartFilters(teams=("u14",), opponents=("river",)), "Date")
        assert _opponents(kept) == ["Riverside"]


class TestSeasonFilter:
    @pytest.mark.parametrize(
        "value,expected",
        [(2025, 2025), (2025.0, 2025), ("2025", 2025), ("2024/25", 2024), ("next", None), (None, None)],
    )
    def test_parse_season(self, value, expected):
        assert parse_season(value) == expected

    def test_keeps_matching_seasons(self, records):
        kept = filter_records(records, ChartFilters(seasons=(2024,)), "Date")
        assert _opponents(kept) == ["Riverside"]

    def test_field_presence_judged_on_whole_dataset(self):
        records = [
            MatchRecord({"Team": "X", "Date": "01/01/2024"}),
            MatchRecord({"Team": "Y", "Date": "01/02/2024", "Season": 2024}),
        ]
        spec = ChartFilters(teams=("x",), seasons=(2024,))
        assert filter_records(records, spec, "Date") == []

    def test_skipped_when_no_record_has_a_season(self):
        records = [MatchRecord({"Opponent": "A"}), MatchRecord({"Opponent": "B"})]
        assert filter_records(records, ChartFilters(seasons=(2025,)), "Date") == records


class TestDateRangeFilter:
    def test_inclusive_bounds(self, records):
        spec = ChartFilters(date_range=DateRange(start="2025-01-10", end="02/14/2025"))
        assert _opponents(filter_records(records, spec, "Date")) == ["FC River Plate", "City"]

    def test_open_start(self, records):
        spec = ChartFilters(date_range=DateRange(end="2024-12-31"))
        assert _opponents(filter_records(records, spec, "Date")) == ["Riverside"]

    def test_open_end_drops_unparseable_dates(self, records):
        spec = ChartFilters(date_range=DateRange(start="2024-01-01"))
        assert "United" not in _opponents(filter_records(records, spec, "Date"))

    def test_skipped_when_x_axis_column_absent(self, records):
        spec = ChartFilters(date_range=DateRange(start="2030-01-01"))
        assert filter_records(records, spec, "Kickoff") == records


class TestFilterEngine:
    def test_no_filters_returns_copy(self, records):
        kept = filter_records(records, ChartFilters(), "Date")
        assert kept == records
        assert kept is not records

    def test_none_spec(self, records):
        assert filter_records(records, None, "Date") == records

    def test_team_filter_skipped_without_team_field(self):
        records = [MatchRecord({"Opponent": "A"})]
        assert filter_records(records, ChartFilters(teams=("u16",)), "Date") == records
