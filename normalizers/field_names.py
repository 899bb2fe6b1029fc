"""
Column label normalization.

Spreadsheet headers arrive as display labels ("Goals For"), while the
relational store's statistics blob uses code-style keys ("goalsFor",
"shots_against"). Both must land on the same canonical label so that
merged records expose one column per statistic.
"""

import re
from typing import Dict, Iterable, List

from contracts.match_record import MatchRecord, Scalar, canonical_for_alias, is_present

_WHITESPACE = re.compile(r"\s+")
_CAPITAL = re.compile(r"([A-Z])")
_CAMEL_MARKERS = ("For", "Against")


def normalize_label(raw: str) -> str:
    """
    Canonicalize one column label.

    - ``shots_against`` -> ``Shots Against``
    - ``goalsFor`` -> ``Goals For``
    - ``Goals For`` -> ``Goals For`` (already canonical)

    Labels matching none of the rules come back verbatim (whitespace tidied).
    Normalizing an output again is a no-op.
    """
    label = _WHITESPACE.sub(" ", str(raw)).strip()
    if not label:
        return label

    if "_" in label:
        words = [w for w in label.replace(" ", "_").split("_") if w]
        label = " ".join(w[0].upper() + w[1:] for w in words)
        # a lone segment ("_goalsFor") may still need the camelCase split

    if not label or " " in label:
        return label

    if any(marker in label for marker in _CAMEL_MARKERS):
        spaced = _CAPITAL.sub(r" \1", label).strip()
        return _WHITESPACE.sub(" ", spaced[0].upper() + spaced[1:])

    return label


def canonical_label(raw: str) -> str:
    """normalize_label plus alias resolution for the identity/date/opponent/team/season fields."""
    normalized = normalize_label(raw)
    return canonical_for_alias(normalized) or canonical_for_alias(raw) or normalized


def deduplicate_record(record: MatchRecord) -> MatchRecord:
    """
    Fold fields whose canonical labels collide into a single field.

    The first present value wins, except that a field already spelled
    canonically replaces a value that came in through an alias.
    """
    values: Dict[str, Scalar] = {}
    canonical_source: Dict[str, bool] = {}

    for label in record:
        value = record.get(label)
        target = canonical_label(label)
        spelled_canonically = label == target

        if target not in values:
            values[target] = value
            canonical_source[target] = spelled_canonically
            continue

        existing = values[target]
        if not is_present(existing) and is_present(value):
            values[target] = value
            canonical_source[target] = spelled_canonically
        elif is_present(value) and spelled_canonically and not canonical_source[target]:
            values[target] = value
            canonical_source[target] = True

    return MatchRecord(values)


def deduplicate_column_keys(records: Iterable[MatchRecord]) -> List[str]:
    keys = set()
    for record in records:
        keys.update(canonical_label(label) for label in record)
    return sorted(keys)
