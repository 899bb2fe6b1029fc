from typing import Any, List, Literal, Optional, Tuple
from dataclasses import dataclass, field

from contracts.errors import ConfigurationError

MAX_SERIES = 10
AGGREGATIONS: Tuple[str, ...] = ("none", "avg", "sum")
GROUP_BY: Tuple[str, ...] = ("match", "date", "team")
DEFAULT_AGGREGATION = "avg"

Aggregation = Literal['none', 'avg', 'sum']
GroupBy = Literal['match', 'date', 'team']


@dataclass(frozen=True)
class AxisConfig:
    """X-axis column of a chart"""
    key: str
    label: Optional[str] = None

    @property
    def display_label(self) -> str:
        return self.label or self.key

    def to_dict(self) -> dict:
        payload = {"key": self.key}
        if self.label is not None:
            payload["label"] = self.label
        return payload


@dataclass(frozen=True)
class SeriesConfig:
    """One plotted column and how to reduce it when a group holds several records"""
    key: str
    label: str
    aggregation: Optional[Aggregation] = None

    @property
    def effective_aggregation(self) -> str:
        return self.aggregation or DEFAULT_AGGREGATION

    def to_dict(self) -> dict:
        payload = {"key": self.key, "label": self.label}
        if self.aggregation is not None:
            payload["aggregation"] = self.aggregation
        return payload


@dataclass(frozen=True)
class DateRange:
    start: Optional[str] = None
    end: Optional[str] = None

    def to_dict(self) -> dict:
        return {k: v for k, v in (("start", self.start), ("end", self.end)) if v is not None}


@dataclass(frozen=True)
class ChartFilters:
    """
    Chart-scoped filters.
    Empty tuples mean the dimension is not filtered.
    """
    teams: Tuple[str, ...] = ()
    opponents: Tuple[str, ...] = ()
    seasons: Tuple[int, ...] = ()
    date_range: Optional[DateRange] = None

    @property
    def is_empty(self) -> bool:
        return not (self.teams or self.opponents or self.seasons or self.date_range)

    def to_dict(self) -> dict:
        payload: dict = {}
        if self.teams:
            payload["teams"] = list(self.teams)
        if self.opponents:
            payload["opponents"] = list(self.opponents)
        if self.seasons:
            payload["seasons"] = list(self.seasons)
        if self.date_range is not None:
            payload["dateRange"] = self.date_range.to_dict()
        return payload

    @classmethod
    def from_dict(cls, payload: Optional[dict]) -> "ChartFilters":
        if not payload:
            return cls()
        if not isinstance(payload, dict):
            raise ConfigurationError("filters must be an object")

        date_range = payload.get("dateRange")
        if date_range is not None and not isinstance(date_range, dict):
            raise ConfigurationError("filters.dateRange must be an object")

        return cls(
            teams=_string_tuple(payload.get("teams"), "filters.teams"),
            opponents=_string_tuple(payload.get("opponents"), "filters.opponents"),
            seasons=_season_tuple(payload.get("seasons")),
            date_range=DateRange(
                start=date_range.get("start") or None,
                end=date_range.get("end") or None,
            ) if date_range is not None else None,
        )


@dataclass(frozen=True)
class ChartConfig:
    """
    User-authored chart definition.
    Immutable for the duration of one assembly.
    """
    x_axis: AxisConfig
    series: Tuple[SeriesConfig, ...]
    filters: ChartFilters = field(default_factory=ChartFilters)
    group_by: Optional[GroupBy] = None

    def validate(self) -> None:
        """
        Validate configuration structure (not data).
        Raises ConfigurationError if invalid.
        """
        if not isinstance(self.x_axis, AxisConfig) or not self.x_axis.key:
            raise ConfigurationError("xAxis.key is required")
        if not self.series:
            raise ConfigurationError("At least one series is required")
        if len(self.series) > MAX_SERIES:
            raise ConfigurationError(f"Maximum {MAX_SERIES} series allowed")

        for s in self.series:
            if not s.key or not s.label:
                raise ConfigurationError("Each series must have key and label")
            if s.aggregation is not None and s.aggregation not in AGGREGATIONS:
                raise ConfigurationError("Invalid aggregation type")

        if self.group_by is not None and self.group_by not in GROUP_BY:
            raise ConfigurationError("Invalid groupBy value")

    @property
    def series_keys(self) -> List[str]:
        return [s.key for s in self.series]

    def to_dict(self) -> dict:
        payload: dict = {
            "xAxis": self.x_axis.to_dict(),
            "series": [s.to_dict() for s in self.series],
        }
        filters = self.filters.to_dict()
        if filters:
            payload["filters"] = filters
        if self.group_by is not None:
            payload["groupBy"] = self.group_by
        return payload

    @classmethod
    def from_dict(cls, payload: Any) -> "ChartConfig":
        """Build and validate a config from its JSON form."""
        if not isinstance(payload, dict):
            raise ConfigurationError("Chart config must be an object")

        x_axis = payload.get("xAxis")
        if not isinstance(x_axis, dict) or not x_axis.get("key"):
            raise ConfigurationError("xAxis.key is required")

        raw_series = payload.get("series")
        if not isinstance(raw_series, list):
            raise ConfigurationError("At least one series is required")
        if any(not isinstance(s, dict) for s in raw_series):
            raise ConfigurationError("Each series must have key and label")

        config = cls(
            x_axis=AxisConfig(key=str(x_axis["key"]), label=x_axis.get("label") or None),
            series=tuple(
                SeriesConfig(
                    key=s.get("key") or "",
                    label=s.get("label") or "",
                    aggregation=s.get("aggregation"),
                )
                for s in raw_series
            ),
            filters=ChartFilters.from_dict(payload.get("filters")),
            group_by=payload.get("groupBy"),
        )
        config.validate()
        return config

    def with_filters(self, filters: ChartFilters) -> "ChartConfig":
        """Copy of this config with request-level filters replacing the saved ones."""
        return ChartConfig(
            x_axis=self.x_axis,
            series=self.series,
            filters=filters,
            group_by=self.group_by,
        )


def _string_tuple(value: Any, name: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"{name} must be a list")
    return tuple(str(v) for v in value if str(v).strip())


def _season_tuple(value: Any) -> Tuple[int, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError("filters.seasons must be a list")
    seasons = []
    for v in value:
        try:
            seasons.append(int(v))
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid season: {v!r}")
    return tuple(seasons)
