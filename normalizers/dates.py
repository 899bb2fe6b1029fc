"""
Date canonicalization for match records.

Every source spells dates differently: the spreadsheet hands back
``MM/DD/YYYY`` text or day serials, the relational store ``YYYY-MM-DD``,
JSON payloads full ISO timestamps. Everything is read into a naive local
``datetime`` first and then formatted, always from local calendar fields.
"""

import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

import pandas as pd

DISPLAY_FORMAT = "%m/%d/%Y"
DAY_KEY_FORMAT = "%Y-%m-%d"

SERIAL_EPOCH = datetime(1899, 12, 30)
SERIAL_LEAP_BUG_THRESHOLD = 59
MIN_SERIAL, MAX_SERIAL = 1, 100000
MIN_YEAR, MAX_YEAR = 2000, 2100

_US_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_ISO_DAY = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_ISO_PREFIX = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})[T ]")
# unformatted cells come back from the sheet as bare serials
_SERIAL_TEXT = re.compile(r"^\d{1,6}(\.\d+)?$")


def _calendar_date(year: int, month: int, day: int) -> Optional[datetime]:
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def _in_year_range(value: datetime) -> bool:
    return MIN_YEAR <= value.year <= MAX_YEAR


def parse_serial(serial: float) -> Optional[datetime]:
    """
    Spreadsheet day serial -> date.
    Serials above 59 drop one more day to undo the 1900 leap-year bug.
    """
    if serial != serial or not (MIN_SERIAL <= serial <= MAX_SERIAL):
        return None
    parsed = SERIAL_EPOCH + timedelta(days=serial - 1)
    if serial > SERIAL_LEAP_BUG_THRESHOLD:
        parsed -= timedelta(days=1)
    parsed = datetime(parsed.year, parsed.month, parsed.day)
    return parsed if _in_year_range(parsed) else None


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _parse_text(text: str) -> Optional[datetime]:
    if _SERIAL_TEXT.match(text):
        return parse_serial(float(text))

    m = _US_DATE.match(text)
    if m:
        month, day, year = (int(g) for g in m.groups())
        return _calendar_date(year, month, day)

    m = _ISO_DAY.match(text)
    if m:
        year, month, day = (int(g) for g in m.groups())
        return _calendar_date(year, month, day)

    m = _ISO_PREFIX.match(text)
    if m:
        try:
            return _to_local_naive(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError:
            pass

    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return None
    return _to_local_naive(parsed.to_pydatetime())


def parse_date(value: Any) -> Optional[datetime]:
    """
    Read any supported date representation.
    Returns None when the value is not a date.
    """
    match value:
        case None | bool():
            return None
        case datetime() if pd.isna(value):
            return None
        case pd.Timestamp():
            return _to_local_naive(value.to_pydatetime())
        case datetime():
            return _to_local_naive(value)
        case date():
            return datetime(value.year, value.month, value.day)
        case int() | float():
            return parse_serial(float(value))
        case str():
            text = value.strip()
            return _parse_text(text) if text else None
        case _:
            return None


def canonicalize_date(value: Any) -> str:
    """
    Format a date as MM/DD/YYYY.
    Unparseable input comes back as its string form so grouping and sorting keep working.
    """
    parsed = parse_date(value)
    if parsed is None:
        return "" if value is None else str(value)
    return parsed.strftime(DISPLAY_FORMAT)


def day_key(value: Any) -> Optional[str]:
    """YYYY-MM-DD day string for grouping, or None."""
    parsed = parse_date(value)
    return parsed.strftime(DAY_KEY_FORMAT) if parsed is not None else None
