from typing import Optional


class ConfigurationError(ValueError):
    """
    Invalid chart configuration.
    Raised at validation time, before any record is touched.
    """


class UpstreamUnavailable(RuntimeError):
    """
    A data source could not deliver rows.
    The merge stage treats this as an empty collection.
    """

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class SheetsError(UpstreamUnavailable):
    """Spreadsheet transport failure carrying the HTTP status (None for transport errors)."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__("sheets", message)
        self.status = status

    @property
    def kind(self) -> str:
        match self.status:
            case None:
                return "transport_error"
            case 400:
                return "bad_request"
            case 403:
                return "forbidden"
            case 404:
                return "not_found"
            case 429:
                return "rate_limited"
            case _:
                return "upstream_error"
