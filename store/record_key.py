from typing import Optional

from contracts.match_record import (
    DATE_LABEL,
    IDENTITY_LABEL,
    OPPONENT_LABEL,
    MatchRecord,
    is_present,
    scalar_text,
)


def derive_key(record: MatchRecord) -> Optional[str]:
    """
    Deduplication key for a record, most reliable identity first:

    1. ``id:<match id>``
    2. ``date:<date>|opponent:<opponent>``
    3. ``date:<date>``
    4. ``opponent:<opponent>``

    Keys are lower-cased. Returns None when none of the fields are present;
    such records cannot take part in a merge.
    """
    match_id = record.lookup(IDENTITY_LABEL)
    if is_present(match_id):
        return f"id:{scalar_text(match_id).strip().lower()}"

    date = record.lookup(DATE_LABEL)
    opponent = record.lookup(OPPONENT_LABEL)
    has_date, has_opponent = is_present(date), is_present(opponent)

    if has_date and has_opponent:
        return f"date:{scalar_text(date).strip()}|opponent:{scalar_text(opponent).strip()}".lower()
    if has_date:
        return f"date:{scalar_text(date).strip()}".lower()
    if has_opponent:
        return f"opponent:{scalar_text(opponent).strip()}".lower()
    return None
