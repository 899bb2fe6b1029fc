from typing import Any, Dict, List, Optional, Tuple, Union
from dataclasses import dataclass

XValue = Union[str, int, float]


@dataclass(frozen=True)
class DataPoint:
    """A single plotted point; y is None for a gap"""
    x: XValue
    y: Optional[Union[int, float]]

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class SeriesData:
    key: str
    label: str
    data: Tuple[DataPoint, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "data": [p.to_dict() for p in self.data],
        }


@dataclass(frozen=True)
class ChartRenderData:
    """
    Chart series ready for a rendering layer.
    to_dict() is the wire shape: {xKey, xLabel, series: [{key, label, data: [{x, y}]}]}
    """
    x_key: str
    x_label: str
    series: Tuple[SeriesData, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "xKey": self.x_key,
            "xLabel": self.x_label,
            "series": [s.to_dict() for s in self.series],
        }

    def series_by_key(self) -> Dict[str, SeriesData]:
        return {s.key: s for s in self.series}

    @property
    def point_count(self) -> int:
        return max((len(s.data) for s in self.series), default=0)

    def y_values(self, key: str) -> List[Optional[Union[int, float]]]:
        return [p.y for p in self.series_by_key()[key].data]
