from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
import logging
import re

from contracts.chart_config import ChartFilters, DateRange
from contracts.match_record import (
    OPPONENT_LABEL,
    SEASON_LABEL,
    TEAM_LABEL,
    MatchRecord,
    Scalar,
    scalar_text,
)
from normalizers.dates import parse_date

_module_logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class BaseFilter(ABC):
    """
    Base class for all chart filters.
    Each filter keeps or drops one record at a time.
    """

    # unique identifier, matches the config key
    key: str

    # human readable name (UI-friendly)
    display_name: str

    @abstractmethod
    def is_active(self) -> bool:
        pass

    @abstractmethod
    def field_present(self, record: MatchRecord) -> bool:
        """Whether the record carries the field this filter reads"""
        pass

    @abstractmethod
    def keep(self, record: MatchRecord) -> bool:
        pass

    def applies_to(self, records: Sequence[MatchRecord]) -> bool:
        """
        A filter whose field no record carries is skipped rather than
        wiping the dataset; many datasets simply lack e.g. season metadata.
        """
        return any(self.field_present(r) for r in records)


class SubstringFilter(BaseFilter):
    """Case-insensitive 'contains any of' match against one aliased field"""
    field: str

    def __init__(self, values: Sequence[str]):
        self.values = tuple(v.lower() for v in values if v)

    def is_active(self) -> bool:
        return bool(self.values)

    def field_present(self, record: MatchRecord) -> bool:
        return record.find_label(self.field) is not None

    def keep(self, record: MatchRecord) -> bool:
        text = scalar_text(record.lookup(self.field)).lower()
        return any(v in text for v in self.values)


class TeamFilter(SubstringFilter):
    key = "teams"
    display_name = "Team"
    field = TEAM_LABEL


class OpponentFilter(SubstringFilter):
    key = "opponents"
    display_name = "Opponent"
    field = OPPONENT_LABEL


def parse_season(value: Scalar) -> Optional[int]:
    match value:
        case int():
            return value
        case float() if value.is_integer():
            return int(value)
        case str():
            m = _LEADING_INT.match(value)
            return int(m.group(1)) if m else None
        case _:
            return None


class SeasonFilter(BaseFilter):
    key = "seasons"
    display_name = "Season"

    def __init__(self, seasons: Sequence[int]):
        self.seasons = frozenset(seasons)

    def is_active(self) -> bool:
        return bool(self.seasons)

    def field_present(self, record: MatchRecord) -> bool:
        return record.find_label(SEASON_LABEL) is not None

    def keep(self, record: MatchRecord) -> bool:
        return parse_season(record.lookup(SEASON_LABEL)) in self.seasons


class DateRangeFilter(BaseFilter):
    """
    Inclusive [start, end] window over the chart's x-axis column.
    Either bound may be omitted; records whose x value is not a date are dropped.
    """
    key = "dateRange"
    display_name = "Date Range"

    def __init__(self, date_range: Optional[DateRange], x_axis_key: str):
        self.x_axis_key = x_axis_key
        self.start: Optional[datetime] = None
        self.end: Optional[datetime] = None
        self._active = date_range is not None
        if date_range is not None:
            self.start = parse_date(date_range.start) if date_range.start else None
            self.end = parse_date(date_range.end) if date_range.end else None

    def is_active(self) -> bool:
        return self._active

    def field_present(self, record: MatchRecord) -> bool:
        return self.x_axis_key in record

    def keep(self, record: MatchRecord) -> bool:
        parsed = parse_date(record.get(self.x_axis_key))
        if parsed is None:
            return False
        if self.start is not None and parsed < self.start:
            return False
        if self.end is not None and parsed > self.end:
            return False
        return True


class FilterEngine:
    """
    Applies a chart's filters: AND across dimensions, OR within one dimension.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or _module_logger

    def build_filters(self, spec: ChartFilters, x_axis_key: str) -> Tuple[BaseFilter, ...]:
        return (
            TeamFilter(spec.teams),
            OpponentFilter(spec.opponents),
            SeasonFilter(spec.seasons),
            DateRangeFilter(spec.date_range, x_axis_key),
        )

    def apply(
        self,
        records: Sequence[MatchRecord],
        spec: Optional[ChartFilters],
        x_axis_key: str,
    ) -> List[MatchRecord]:
        filtered = list(records)
        if spec is None or spec.is_empty:
            return filtered

        for f in self.build_filters(spec, x_axis_key):
            if not f.is_active():
                continue
            if not f.applies_to(records):
                self.logger.debug(
                    "Filter skipped: field absent from dataset",
                    extra={"event": "filter_skipped", "filter": f.key},
                )
                continue

            before = len(filtered)
            filtered = [r for r in filtered if f.keep(r)]
            self.logger.debug(
                "Filter applied",
                extra={"event": "filter_applied", "filter": f.key, "before": before, "after": len(filtered)},
            )

        return filtered


def filter_records(
    records: Sequence[MatchRecord],
    spec: Optional[ChartFilters],
    x_axis_key: str,
    logger: Optional[logging.Logger] = None,
) -> List[MatchRecord]:
    return FilterEngine(logger=logger).apply(records, spec, x_axis_key)
