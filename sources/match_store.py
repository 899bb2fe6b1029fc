from __future__ import annotations

import logging
from typing import Any, Sequence

import sqlalchemy as sa
from sqlalchemy.engine import Engine

from contracts.record_source_contract import RecordSourceContract

logger = logging.getLogger(__name__)

metadata = sa.MetaData()

teams_table = sa.Table(
    "teams",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("name", sa.String(255), nullable=False),
)

matches_table = sa.Table(
    "matches",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id"), nullable=True),
    sa.Column("opponent_name", sa.String(255), nullable=False),
    sa.Column("match_date", sa.String(32), nullable=False),
    sa.Column("competition_type", sa.String(64), nullable=True),
    sa.Column("result", sa.String(32), nullable=True),
    sa.Column("is_home", sa.Boolean, nullable=True),
    # JSON object stored as text; keys are camelCase or snake_case stat names
    sa.Column("stats_json", sa.Text, nullable=True),
    sa.Column("notes", sa.Text, nullable=True),
    sa.Column("venue", sa.String(255), nullable=True),
    sa.Column("referee", sa.String(255), nullable=True),
)


class MatchStore(RecordSourceContract):
    """Read access to curated matches in the relational store."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "MatchStore":
        return cls(sa.create_engine(database_url, pool_pre_ping=True))

    @property
    def name(self) -> str:
        return "store"

    def create_schema(self) -> None:
        metadata.create_all(self.engine)

    def fetch_matches(
        self,
        team_id: int | None = None,
        team_ids: Sequence[int] | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Matches newest first. Dates compare as stored text (YYYY-MM-DD).
        """
        stmt = (
            sa.select(matches_table, teams_table.c.name.label("team_name"))
            .select_from(
                matches_table.outerjoin(teams_table, matches_table.c.team_id == teams_table.c.id)
            )
            .order_by(matches_table.c.match_date.desc(), matches_table.c.id.desc())
        )

        if team_id is not None:
            stmt = stmt.where(matches_table.c.team_id == team_id)
        elif team_ids:
            stmt = stmt.where(matches_table.c.team_id.in_(list(team_ids)))
        if start_date:
            stmt = stmt.where(matches_table.c.match_date >= start_date)
        if end_date:
            stmt = stmt.where(matches_table.c.match_date <= end_date)

        with self.engine.connect() as conn:
            rows = [dict(row) for row in conn.execute(stmt).mappings()]

        logger.debug("Fetched store matches", extra={"event": "store_fetch", "row_count": len(rows)})
        return rows

    def fetch(self, **filters: Any) -> list[dict[str, Any]]:
        return self.fetch_matches(
            team_id=filters.get("team_id"),
            team_ids=filters.get("team_ids"),
            start_date=filters.get("start_date"),
            end_date=filters.get("end_date"),
        )
