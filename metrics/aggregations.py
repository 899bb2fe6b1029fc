from typing import Any, Dict, Iterable, List, Optional, Union
from dataclasses import dataclass

import pandas as pd

Number = Union[int, float]


def to_number(value: Any) -> Optional[Number]:
    """
    Numeric reading of a record value, or None when it has none.
    Bools and blank/unparseable strings are not numbers.
    """
    match value:
        case None | bool():
            return None
        case int():
            return value
        case float():
            return None if pd.isna(value) else value
        case str():
            text = value.strip()
            if not text:
                return None
            parsed = pd.to_numeric(text, errors="coerce")
            return None if pd.isna(parsed) else float(parsed)
        case _:
            return None


def numeric_values(values: Iterable[Any]) -> List[Number]:
    out: List[Number] = []
    for v in values:
        number = to_number(v)
        if number is not None:
            out.append(number)
    return out


@dataclass(frozen=True)
class AggregationSpec:
    """
    Reduces a group's values for one series into a single point.
    Returns None for an empty value set: a gap, never a zero.
    """
    key: str
    name: str

    def compute(self, values: Iterable[Any]) -> Optional[Number]:
        numbers = numeric_values(values)
        if not numbers:
            return None
        return self._reduce(numbers)

    def _reduce(self, numbers: List[Number]) -> Number:
        raise NotImplementedError


@dataclass(frozen=True)
class SumAggregation(AggregationSpec):
    def _reduce(self, numbers: List[Number]) -> Number:
        return pd.Series(numbers).sum().item()


@dataclass(frozen=True)
class AverageAggregation(AggregationSpec):
    def _reduce(self, numbers: List[Number]) -> Number:
        return float(pd.Series(numbers, dtype="float64").mean())


@dataclass(frozen=True)
class FirstValueAggregation(AggregationSpec):
    """First value in group order, which is not necessarily the earliest match"""

    def _reduce(self, numbers: List[Number]) -> Number:
        return numbers[0]


AGGREGATORS: Dict[str, AggregationSpec] = {
    "sum": SumAggregation(key="sum", name="Sum"),
    "avg": AverageAggregation(key="avg", name="Average"),
    "none": FirstValueAggregation(key="none", name="First value"),
}


def aggregate(values: Iterable[Any], fn: str) -> Optional[Number]:
    try:
        spec = AGGREGATORS[fn]
    except KeyError:
        raise ValueError(f"Unsupported aggregation: {fn}")
    return spec.compute(values)
