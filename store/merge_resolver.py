"""
Cross-source merge of match records.

The spreadsheet (primary) and the relational store (secondary) can both
hold the same match. The store carries curated and computed statistics,
so it wins every key collision; the spreadsheet's external match id is
kept on the winning record because that is the id people look matches up by.

Usage:
    resolver = MergeResolver()
    result = resolver.resolve(sheet_records, store_records)
    result.records   # merged view, newest date string first
    result.report    # counts + records that could not be keyed
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from contracts.match_record import DATE_LABEL, IDENTITY_LABEL, MatchRecord, is_present, scalar_text
from store.record_key import derive_key

_module_logger = logging.getLogger(__name__)


@dataclass
class MergeReport:
    """Diagnostics of one merge."""
    primary_count: int = 0
    secondary_count: int = 0
    merged_count: int = 0
    duplicates_skipped: int = 0
    overridden: int = 0
    unkeyed_primary: List[MatchRecord] = field(default_factory=list)
    unkeyed_secondary: List[MatchRecord] = field(default_factory=list)

    @property
    def unkeyed_count(self) -> int:
        return len(self.unkeyed_primary) + len(self.unkeyed_secondary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary_count": self.primary_count,
            "secondary_count": self.secondary_count,
            "merged_count": self.merged_count,
            "duplicates_skipped": self.duplicates_skipped,
            "overridden": self.overridden,
            "unkeyed_count": self.unkeyed_count,
            "unkeyed_primary": [r.to_dict() for r in self.unkeyed_primary],
            "unkeyed_secondary": [r.to_dict() for r in self.unkeyed_secondary],
        }


@dataclass(frozen=True)
class MergeResult:
    records: List[MatchRecord]
    report: MergeReport


def _date_sort_key(record: MatchRecord) -> str:
    return scalar_text(record.lookup(DATE_LABEL))


class MergeResolver:
    """
    Merges two per-source record collections into one deduplicated view.

    Either side may be empty (a failed source degrades to no rows).
    Nothing here raises on bad records; problems are logged and reported.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        primary_name: str = "sheets",
        secondary_name: str = "store",
    ):
        self.logger = logger or _module_logger
        self.primary_name = primary_name
        self.secondary_name = secondary_name

    def resolve(
        self,
        primary: Sequence[MatchRecord],
        secondary: Sequence[MatchRecord],
    ) -> MergeResult:
        report = MergeReport(primary_count=len(primary), secondary_count=len(secondary))
        merged: Dict[str, MatchRecord] = {}
        primary_ids: Dict[str, Any] = {}

        for record in primary:
            key = derive_key(record)
            if key is None:
                report.unkeyed_primary.append(record)
                self.logger.warning(
                    "Record skipped from merge: no match id, date or opponent",
                    extra={"event": "merge_unkeyed", "source": self.primary_name},
                )
                continue

            if key in merged:
                report.duplicates_skipped += 1
                self.logger.info(
                    "Duplicate record skipped",
                    extra={"event": "merge_duplicate", "source": self.primary_name, "key": key},
                )
                continue

            merged[key] = record
            identity = record.lookup(IDENTITY_LABEL)
            if is_present(identity):
                primary_ids[key] = identity

        for record in secondary:
            key = derive_key(record)
            if key is None:
                report.unkeyed_secondary.append(record)
                self.logger.warning(
                    "Record skipped from merge: no match id, date or opponent",
                    extra={"event": "merge_unkeyed", "source": self.secondary_name},
                )
                continue

            if key in primary_ids:
                label = record.find_label(IDENTITY_LABEL) or IDENTITY_LABEL
                record = record.with_value(label, primary_ids[key])
            if key in merged:
                report.overridden += 1
            merged[key] = record

        records = sorted(merged.values(), key=_date_sort_key, reverse=True)
        report.merged_count = len(records)

        self.logger.info(
            "Merged match records",
            extra={
                "event": "merge_complete",
                "primary_count": report.primary_count,
                "secondary_count": report.secondary_count,
                "merged_count": report.merged_count,
                "unkeyed_count": report.unkeyed_count,
            },
        )
        return MergeResult(records=records, report=report)

    def merge(
        self,
        primary: Sequence[MatchRecord],
        secondary: Sequence[MatchRecord],
    ) -> List[MatchRecord]:
        return self.resolve(primary, secondary).records


def merge_records(
    primary: Sequence[MatchRecord],
    secondary: Sequence[MatchRecord],
    logger: Optional[logging.Logger] = None,
) -> List[MatchRecord]:
    return MergeResolver(logger=logger).merge(primary, secondary)
