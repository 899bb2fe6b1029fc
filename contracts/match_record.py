from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

Scalar = Union[str, int, float, None]

# Canonical label -> accepted spellings, checked in order, case-insensitively.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "Match ID": ("Match ID", "match id", "MatchId", "matchId", "match_id"),
    "Date": ("Date", "date", "Match Date", "matchDate", "match_date"),
    "Opponent": ("Opponent", "opponent", "Opponent Name", "opponentName", "opponent_name"),
    "Team": ("Team", "team", "Team Name", "teamName", "team_name"),
    "Season": ("Season", "season"),
}

IDENTITY_LABEL = "Match ID"
DATE_LABEL = "Date"
OPPONENT_LABEL = "Opponent"
TEAM_LABEL = "Team"
SEASON_LABEL = "Season"


def aliases_for(canonical: str) -> Tuple[str, ...]:
    """Alias spellings for a canonical label; unknown labels alias only themselves."""
    return FIELD_ALIASES.get(canonical, (canonical,))


def canonical_for_alias(label: str) -> Optional[str]:
    lowered = label.strip().lower()
    for canonical, aliases in FIELD_ALIASES.items():
        if any(lowered == alias.lower() for alias in aliases):
            return canonical
    return None


def coerce_scalar(value: Any) -> Scalar:
    """
    Narrow an arbitrary value to the record's scalar tags.
    Blank strings and NaN are absent; bools become ints; other objects are stringified.
    """
    match value:
        case None:
            return None
        case bool():
            return int(value)
        case int():
            return value
        case float():
            return None if value != value else value
        case str():
            return value if value.strip() else None
        case _:
            return str(value)


def is_present(value: Scalar) -> bool:
    match value:
        case None:
            return False
        case str():
            return bool(value.strip())
        case _:
            return True


def scalar_text(value: Scalar) -> str:
    """Display text for a scalar; integral floats drop their trailing '.0'."""
    match value:
        case None:
            return ""
        case float() if value.is_integer():
            return str(int(value))
        case _:
            return str(value)


class MatchRecord:
    """
    One logical match as an ordered label -> scalar mapping.
    The schema is open: labels come from whatever columns a source carries.
    """

    def __init__(self, fields: Optional[Mapping[str, Any]] = None):
        self._fields: Dict[str, Scalar] = {}
        for label, value in (fields or {}).items():
            self._fields[str(label)] = coerce_scalar(value)

    @property
    def labels(self) -> List[str]:
        return list(self._fields.keys())

    def get(self, label: str) -> Scalar:
        return self._fields.get(label)

    def __contains__(self, label: object) -> bool:
        return label in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatchRecord):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        return f"MatchRecord({self._fields!r})"

    def find_label(self, canonical: str) -> Optional[str]:
        """
        Resolve which of this record's labels carries a canonical field.
        Aliases are tried in table order; the first one holding a present value wins.
        """
        by_lower: Dict[str, str] = {}
        for label in self._fields:
            by_lower.setdefault(label.lower(), label)

        fallback = None
        for alias in aliases_for(canonical):
            label = by_lower.get(alias.lower())
            if label is None:
                continue
            if is_present(self._fields[label]):
                return label
            fallback = fallback or label
        return fallback

    def lookup(self, canonical: str) -> Scalar:
        label = self.find_label(canonical)
        return self._fields[label] if label is not None else None

    def with_value(self, label: str, value: Any) -> "MatchRecord":
        fields = dict(self._fields)
        fields[label] = coerce_scalar(value)
        return MatchRecord(fields)

    def to_dict(self) -> Dict[str, Scalar]:
        return dict(self._fields)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MatchRecord":
        return cls(payload)
