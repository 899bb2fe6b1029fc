"""
Chart data assembly: filter -> group -> aggregate, once per configured series.

The output never changes shape with the input: a series whose column no
record carries still yields one point per group, each with ``y=None``.
"""

from functools import cmp_to_key
from typing import List, Optional, Sequence
import logging

from chart.grouping import group_records
from chart.render_data import ChartRenderData, DataPoint, SeriesData
from contracts.chart_config import ChartConfig, SeriesConfig
from contracts.match_record import MatchRecord, is_present
from filters.filters import FilterEngine
from metrics.aggregations import aggregate

_module_logger = logging.getLogger(__name__)


def _compare_x(a: DataPoint, b: DataPoint) -> int:
    ax, bx = a.x, b.x
    if isinstance(ax, str) and isinstance(bx, str):
        return (ax > bx) - (ax < bx)
    if _is_number(ax) and _is_number(bx):
        return (ax > bx) - (ax < bx)
    return 0


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sort_points(points: Sequence[DataPoint]) -> List[DataPoint]:
    """Ascending by x; mixed-type pairs keep their relative order."""
    return sorted(points, key=cmp_to_key(_compare_x))


class ChartDataAssembler:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or _module_logger
        self.filter_engine = FilterEngine(logger=self.logger)

    def _series_points(self, groups, series: SeriesConfig, config: ChartConfig) -> List[DataPoint]:
        x_key = config.x_axis.key
        fn = series.effective_aggregation
        points: List[DataPoint] = []

        for group_key, rows in groups.items():
            if config.group_by == "date":
                x = group_key
            else:
                first = rows[0].get(x_key) if rows else None
                x = first if is_present(first) else group_key

            y = aggregate((r.get(series.key) for r in rows), fn)
            points.append(DataPoint(x=x, y=y))

        return sort_points(points)

    def assemble(self, records: Sequence[MatchRecord], config: ChartConfig) -> ChartRenderData:
        config.validate()
        x_key = config.x_axis.key

        filtered = self.filter_engine.apply(records, config.filters, x_key)
        groups = group_records(filtered, config.group_by, x_key)

        series = tuple(
            SeriesData(
                key=s.key,
                label=s.label,
                data=tuple(self._series_points(groups, s, config)),
            )
            for s in config.series
        )

        self.logger.debug(
            "Assembled chart data",
            extra={
                "event": "chart_assembled",
                "record_count": len(records),
                "filtered_count": len(filtered),
                "group_count": len(groups),
                "series_count": len(series),
            },
        )
        return ChartRenderData(x_key=x_key, x_label=config.x_axis.display_label, series=series)


def assemble(
    records: Sequence[MatchRecord],
    config: ChartConfig,
    logger: Optional[logging.Logger] = None,
) -> ChartRenderData:
    return ChartDataAssembler(logger=logger).assemble(records, config)
