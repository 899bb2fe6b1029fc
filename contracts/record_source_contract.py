from abc import ABC, abstractmethod
from typing import Any, List


class RecordSourceContract(ABC):
    """
    Contract for an upstream match data source.
    Sources only move rows; conversion into MatchRecords happens in the builders.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Short source name used in logs and diagnostics
        e.g. 'sheets', 'store'
        """
        pass

    @abstractmethod
    def fetch(self, **filters: Any) -> List[Any]:
        """
        Returns raw rows.
        Raises UpstreamUnavailable (or any transport error) on failure
        """
        pass
