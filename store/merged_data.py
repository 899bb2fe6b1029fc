from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Sequence

from builders.match_record_builder import MatchRecordBuilder
from contracts.match_record import MatchRecord
from contracts.record_source_contract import RecordSourceContract
from normalizers.field_names import deduplicate_record
from store.merge_resolver import MergeReport, MergeResolver

_module_logger = logging.getLogger(__name__)


@dataclass
class MergedDataset:
    """Merged view plus the per-source collections it was built from."""
    records: list[MatchRecord]
    sheet_records: list[MatchRecord]
    store_records: list[MatchRecord]
    report: MergeReport
    source_errors: dict[str, str] = field(default_factory=dict)

    def to_dict(self, deduplicate: bool = False) -> dict[str, Any]:
        records = [deduplicate_record(r) for r in self.records] if deduplicate else self.records
        return {
            "records": [r.to_dict() for r in records],
            "counts": {
                "sheets": len(self.sheet_records),
                "store": len(self.store_records),
                "merged": len(self.records),
            },
            "report": self.report.to_dict(),
            "source_errors": dict(self.source_errors),
        }


class MergedDataService:
    """
    Loads both sources concurrently and merges them.

    A failing source contributes no rows and an entry in ``source_errors``;
    the other source is still merged and returned. Retries belong to the
    transports, not here.
    """

    def __init__(
        self,
        sheet_source: RecordSourceContract,
        store_source: RecordSourceContract,
        logger: logging.Logger | None = None,
    ):
        self.sheet_source = sheet_source
        self.store_source = store_source
        self.logger = logger or _module_logger

    def _collect(self, future: Future, source: RecordSourceContract, errors: dict[str, str]) -> list:
        try:
            return future.result() or []
        except Exception as e:
            # Source boundary: any transport or driver failure degrades to empty input
            errors[source.name] = str(e)
            self.logger.warning(
                "Source unavailable, continuing without it",
                extra={"event": "source_failed", "source": source.name, "error": str(e)},
            )
            return []

    def load(
        self,
        sheet_range: str | None = None,
        team_id: int | None = None,
        team_ids: Sequence[int] | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> MergedDataset:
        errors: dict[str, str] = {}

        with ThreadPoolExecutor(max_workers=2) as executor:
            sheet_future = executor.submit(self.sheet_source.fetch, sheet_range=sheet_range)
            store_future = executor.submit(
                self.store_source.fetch,
                team_id=team_id,
                team_ids=team_ids,
                start_date=start_date,
                end_date=end_date,
            )
            sheet_values = self._collect(sheet_future, self.sheet_source, errors)
            store_rows = self._collect(store_future, self.store_source, errors)

        builder = MatchRecordBuilder()
        sheet_records = builder.from_sheet_values(sheet_values)
        store_records = builder.from_store_rows(store_rows)

        resolver = MergeResolver(
            logger=self.logger,
            primary_name=self.sheet_source.name,
            secondary_name=self.store_source.name,
        )
        result = resolver.resolve(sheet_records, store_records)

        return MergedDataset(
            records=result.records,
            sheet_records=sheet_records,
            store_records=store_records,
            report=result.report,
            source_errors=errors,
        )
