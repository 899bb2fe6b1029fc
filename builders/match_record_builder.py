from typing import Any, Dict, List, Mapping, Optional, Sequence
import json
import logging
import re

from contracts.match_record import (
    DATE_LABEL,
    IDENTITY_LABEL,
    MatchRecord,
    Scalar,
    canonical_for_alias,
)
from normalizers.dates import canonicalize_date
from normalizers.field_names import normalize_label

logger = logging.getLogger(__name__)

_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_INTEGRAL = re.compile(r"^[+-]?\d+$")
_LOOKS_LIKE_DATE = (
    re.compile(r"^\d{1,2}/\d{1,2}/\d{4}"),
    re.compile(r"^\d{4}-\d{1,2}-\d{1,2}"),
)


def coerce_cell(header: str, raw: Any) -> Scalar:
    """
    Convert one spreadsheet cell.
    Date columns and date-looking text stay strings; purely numeric text becomes a number.
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None

    if "date" in header.lower():
        return text
    if any(p.match(text) for p in _LOOKS_LIKE_DATE):
        return text

    if _NUMERIC.match(text):
        if _INTEGRAL.match(text):
            return int(text)
        return float(text)
    return text


def _home_away(is_home: Any) -> str:
    match is_home:
        case True | 1:
            return "Home"
        case False | 0:
            return "Away"
        case _:
            return ""


class MatchRecordBuilder:
    """
    Builds MatchRecords from raw source rows.
    Field naming and date canonicalization live here, per source.
    """
    def __init__(self):
        self.column_keys = set()

    def _canonicalize_date_field(self, fields: Dict[str, Any]) -> None:
        for label in list(fields):
            if canonical_for_alias(label) == DATE_LABEL and fields[label] not in (None, ""):
                fields[label] = canonicalize_date(fields[label])

    def from_sheet_values(self, values: Sequence[Sequence[Any]]) -> List[MatchRecord]:
        """
        values: 2-D cell grid from the spreadsheet, first row = headers.
        Returns one record per data row.
        """
        if not values:
            return []

        headers = [str(h).strip() for h in values[0]]
        records: List[MatchRecord] = []

        for row in values[1:]:
            fields: Dict[str, Any] = {}
            for index, header in enumerate(headers):
                if not header:
                    continue
                raw = row[index] if index < len(row) else None
                fields[header] = coerce_cell(header, raw)

            self._canonicalize_date_field(fields)
            self.column_keys.update(fields.keys())
            records.append(MatchRecord(fields))

        return records

    def _parse_stats(self, stats_json: Any, match_id: Any) -> Dict[str, Any]:
        if stats_json is None or stats_json == "":
            return {}
        if isinstance(stats_json, dict):
            return stats_json
        try:
            parsed = json.loads(stats_json)
        except (TypeError, ValueError):
            logger.warning(
                "Ignoring unreadable stats_json",
                extra={"event": "stats_json_invalid", "match_id": match_id},
            )
            return {}
        if not isinstance(parsed, dict):
            logger.warning(
                "Ignoring non-object stats_json",
                extra={"event": "stats_json_invalid", "match_id": match_id},
            )
            return {}
        return parsed

    def from_store_row(self, row: Mapping[str, Any]) -> MatchRecord:
        """
        row: one match row from the relational store.
        Must contain at least:
        - 'id', 'opponent_name', 'match_date'
        """
        match_id = row.get("id")
        fields: Dict[str, Any] = {
            IDENTITY_LABEL: match_id,
            "Opponent": row.get("opponent_name"),
            DATE_LABEL: canonicalize_date(row.get("match_date")),
            "Competition Type": row.get("competition_type") or "",
            "Result": row.get("result") or "",
            "Home/Away": _home_away(row.get("is_home")),
            "Venue": row.get("venue") or "",
            "Referee": row.get("referee") or "",
            "Notes": row.get("notes") or "",
        }

        for key, value in self._parse_stats(row.get("stats_json"), match_id).items():
            label = normalize_label(key)
            if canonical_for_alias(label) == IDENTITY_LABEL or canonical_for_alias(key) == IDENTITY_LABEL:
                # An id typed into the match form is the human-meaningful one
                if value not in (None, ""):
                    fields[IDENTITY_LABEL] = value
                continue
            if isinstance(value, (dict, list)):
                value = json.dumps(value, ensure_ascii=False)
            fields[label] = value

        if row.get("team_id") is not None:
            fields["Team ID"] = row.get("team_id")
        if row.get("team_name"):
            fields["Team"] = row.get("team_name")

        self._canonicalize_date_field(fields)
        self.column_keys.update(fields.keys())
        return MatchRecord(fields)

    def from_store_rows(self, rows: Sequence[Mapping[str, Any]]) -> List[MatchRecord]:
        return [self.from_store_row(r) for r in rows]
