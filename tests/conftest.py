from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

import rydercup.main as main
from rydercup.db import ensure_schema
from rydercup.migrations import apply_migrations
from rydercup.settings import Settings

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def database_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'rydercup.db'}"
    ensure_schema(url)
    apply_migrations(url)
    return url


@pytest.fixture
def client(monkeypatch, database_url):
    monkeypatch.setattr(main, "settings", Settings(database_url=database_url, admin_pin="9999"))
    monkeypatch.setattr(main, "_now", lambda: NOW)
    monkeypatch.setattr(main, "send_player_invite", lambda *_args: False)
    return TestClient(main.app)


@pytest.fixture
def create_game(client):
    def _create(tournament_date: str = "2026-06-01", **extra) -> dict:
        payload = {
            "name": "Spring Cup",
            "tournament_date": tournament_date,
            "days": [{"day_number": 1, "format": "singles", "num_matches": 4}],
            **extra,
        }
        response = client.post("/api/games", json=payload)
        assert response.status_code == 201
        return response.json()["game"]

    return _create


@pytest.fixture
def add_players(client):
    def _add(game_id: int, handicaps: list) -> list[dict]:
        players = []
        for idx, handicap in enumerate(handicaps, 1):
            response = client.post(
                f"/api/games/{game_id}/players",
                json={"name": f"Player {idx}", "email": f"p{idx}@example.com", "handicap": handicap},
            )
            assert response.status_code == 201
            players.append(response.json()["player"])
        return players

    return _add


@pytest.fixture
def now():
    return NOW
