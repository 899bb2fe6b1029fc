"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import json
import os
import threading
from typing import Any

import pytest
import sqlalchemy as sa
from sqlalchemy.pool import StaticPool

# Set required environment variables before any imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "development")

from backend_api import create_app
from config import Settings
from contracts.match_record import MatchRecord
from contracts.record_source_contract import RecordSourceContract
from sources.match_store import MatchStore, matches_table, teams_table
from store.merged_data import MergedDataService


class FakeSource(RecordSourceContract):
    """In-memory source returning canned rows, or raising a canned error."""

    def __init__(
        self,
        name: str,
        rows: list[Any] | None = None,
        error: Exception | None = None,
        barrier: threading.Barrier | None = None,
    ):
        self._name = name
        self.rows = rows or []
        self.error = error
        self.barrier = barrier
        self.calls: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return self._name

    def fetch(self, **filters: Any) -> list[Any]:
        self.calls.append(filters)
        if self.barrier is not None:
            # blocks until the other source is fetching too
            self.barrier.wait()
        if self.error is not None:
            raise self.error
        return list(self.rows)


@pytest.fixture
def sheet_values():
    """Spreadsheet grid as returned by the values API."""
    return [
        ["Match ID", "Date", "Opponent", "Team", "Season", "Goals For", "Shots", "Possession"],
        ["M-100", "01/15/2025", "Rovers", "U16 Boys", "2025", "2", "11", "55%"],
        ["M-101", "1/22/2025", "City", "U16 Boys", "2025", "0", "4", ""],
        ["", "02/01/2025", "United", "U14 Girls", "2024", "3", "9.5"],
    ]


@pytest.fixture
def store_engine():
    """In-memory SQLite engine shared across connections."""
    engine = sa.create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def match_store(store_engine):
    store = MatchStore(store_engine)
    store.create_schema()
    with store_engine.begin() as conn:
        conn.execute(sa.insert(teams_table), [
            {"id": 1, "name": "U16 Boys"},
            {"id": 2, "name": "U14 Girls"},
        ])
        conn.execute(sa.insert(matches_table), [
            {
                "id": 7,
                "team_id": 1,
                "opponent_name": "Rovers",
                "match_date": "2025-01-15",
                "competition_type": "League",
                "result": "W",
                "is_home": True,
                "stats_json": json.dumps({"matchId": "M-100", "goalsFor": 3, "shots_against": 5}),
            },
            {
                "id": 8,
                "team_id": 1,
                "opponent_name": "Athletic",
                "match_date": "2025-03-02",
                "competition_type": "Cup",
                "result": "L",
                "is_home": False,
                "stats_json": json.dumps({"goalsFor": 1}),
            },
            {
                "id": 9,
                "team_id": 2,
                "opponent_name": "Wanderers",
                "match_date": "2024-10-05",
                "competition_type": None,
                "result": "D",
                "is_home": None,
                "stats_json": "not json",
            },
        ])
    return store


@pytest.fixture
def sample_records():
    """Merged-style records for chart assembly."""
    return [
        MatchRecord({"Match ID": "A", "Date": "01/15/2025", "Opponent": "Rovers", "Goals For": 2, "Shots": 10}),
        MatchRecord({"Match ID": "B", "Date": "01/15/2025", "Opponent": "City", "Goals For": 4, "Shots": None}),
        MatchRecord({"Match ID": "C", "Date": "02/01/2025", "Opponent": "United", "Goals For": 1, "Shots": "7"}),
    ]


@pytest.fixture
def test_settings():
    return Settings(
        spreadsheet_id="sheet-id",
        sheets_api_key="key",
        database_url="sqlite://",
        environment="test",
        cors_origin="http://localhost:3000",
    )


@pytest.fixture
def fake_service(sheet_values, match_store):
    return MergedDataService(FakeSource("sheets", rows=sheet_values), match_store)


@pytest.fixture
def client(fake_service, test_settings):
    app = create_app(service=fake_service, settings=test_settings)
    app.config["TESTING"] = True
    return app.test_client()
