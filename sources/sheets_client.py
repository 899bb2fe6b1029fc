from __future__ import annotations

import json
import logging
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from contracts.errors import SheetsError
from contracts.record_source_contract import RecordSourceContract

logger = logging.getLogger(__name__)

SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_SHEET_RANGE = "Match Log!A1:ZZ1000"
DEFAULT_TIMEOUT_SECONDS = 15

_STATUS_HINTS = {
    400: "Invalid request: {detail}. Check the range format (e.g. 'Sheet1!A1:Z100').",
    403: "Google Sheets API access denied: {detail}. Check the API key, sheet sharing and quota.",
    404: "Spreadsheet not found: {detail}. Check the spreadsheet id and the sheet name in the range.",
    429: "Google Sheets API rate limit hit: {detail}.",
}


def _error_detail(body: Any, fallback: str) -> str:
    if not isinstance(body, dict):
        return fallback
    error = body.get("error") or {}
    if not isinstance(error, dict):
        return fallback
    message = error.get("message") or fallback
    details = error.get("details") or []
    extra = [d.get("message", str(d)) if isinstance(d, dict) else str(d) for d in details]
    return f"{message} ({', '.join(extra)})" if extra else message


class SheetsClient(RecordSourceContract):
    """
    Reads cell ranges from the Google Sheets values API.
    Returns raw string grids; conversion to records happens in the builders.
    """

    def __init__(
        self,
        spreadsheet_id: str | None,
        api_key: str | None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        default_range: str = DEFAULT_SHEET_RANGE,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.api_key = api_key
        self.timeout = timeout
        self.default_range = default_range

    @property
    def name(self) -> str:
        return "sheets"

    def _values_url(self, cell_range: str) -> str:
        if not self.spreadsheet_id:
            raise SheetsError("GOOGLE_SHEETS_SPREADSHEET_ID is not set")
        if not self.api_key:
            raise SheetsError("GOOGLE_SHEETS_API_KEY is not set")
        return (
            f"{SHEETS_API_BASE}/{quote(self.spreadsheet_id, safe='')}"
            f"/values/{quote(cell_range, safe='')}?key={quote(self.api_key, safe='')}"
        )

    def _get_json(self, url: str) -> Any:
        req = Request(url, headers={"Accept": "application/json"})
        try:
            with urlopen(req, timeout=self.timeout) as response:
                return json.load(response)
        except HTTPError as e:
            try:
                body = json.load(e)
            except (TypeError, ValueError):
                body = None
            detail = _error_detail(body, e.reason if isinstance(e.reason, str) else str(e.code))
            hint = _STATUS_HINTS.get(e.code, "Google Sheets API error ({status}): {detail}")
            raise SheetsError(hint.format(detail=detail, status=e.code), status=e.code) from e
        except (URLError, TimeoutError, OSError) as e:
            raise SheetsError(f"Google Sheets transport error: {e}") from e
        except ValueError as e:
            raise SheetsError(f"Google Sheets returned invalid JSON: {e}") from e

    def fetch_values(self, cell_range: str | None = None) -> list[list[str]]:
        cell_range = cell_range or self.default_range
        url = self._values_url(cell_range)
        logger.debug("Fetching sheet range", extra={"event": "sheets_fetch", "range": cell_range})

        payload = self._get_json(url)
        values = payload.get("values") if isinstance(payload, dict) else None
        if not values:
            return []
        return [[("" if cell is None else str(cell)) for cell in row] for row in values]

    def fetch(self, **filters: Any) -> list[list[str]]:
        return self.fetch_values(filters.get("sheet_range"))

    def fetch_column_metadata(self, cell_range: str = "Metadata!A1:Z200") -> dict[str, dict[str, str]]:
        """
        Column descriptions from a metadata tab: first column = column name,
        remaining columns keyed by their (lower-cased) headers.
        Any failure yields an empty mapping.
        """
        try:
            values = self.fetch_values(cell_range)
        except SheetsError as e:
            logger.info("Column metadata unavailable", extra={"event": "sheets_metadata", "error": str(e)})
            return {}
        if not values:
            return {}

        headers = [h.strip().lower() for h in values[0]]
        metadata: dict[str, dict[str, str]] = {}
        for row in values[1:]:
            column = row[0].strip() if row else ""
            if not column:
                continue
            metadata[column] = {
                headers[i]: cell.strip()
                for i, cell in enumerate(row)
                if 0 < i < len(headers) and cell.strip()
            }
        return metadata
