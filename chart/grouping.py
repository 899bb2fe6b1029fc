from typing import Dict, List, Optional, Sequence
import logging

from contracts.match_record import MatchRecord
from normalizers.dates import day_key

logger = logging.getLogger(__name__)

UNKNOWN_GROUP = "unknown"


def point_key(index: int) -> str:
    return f"point_{index}"


def group_records(
    records: Sequence[MatchRecord],
    strategy: Optional[str],
    x_axis_key: str,
) -> Dict[str, List[MatchRecord]]:
    """
    Partition records for aggregation.

    - None / 'match': one singleton group per record, keyed by position
    - 'date': one group per day of the x-axis value (YYYY-MM-DD);
      records whose x value is not a date share the 'unknown' group
    - 'team': grouped like 'match'. Per-team charts are built by the
      caller pre-filtering the records once per team.
    """
    groups: Dict[str, List[MatchRecord]] = {}

    match strategy:
        case "date":
            for record in records:
                key = day_key(record.get(x_axis_key)) or UNKNOWN_GROUP
                groups.setdefault(key, []).append(record)
        case None | "match" | "team":
            if strategy == "team":
                logger.debug("Team grouping falls back to per-match points", extra={"event": "group_team"})
            for index, record in enumerate(records):
                groups[point_key(index)] = [record]
        case _:
            raise ValueError(f"Unsupported grouping strategy: {strategy}")

    return groups
