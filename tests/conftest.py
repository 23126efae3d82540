"""Pytest configuration and shared fixtures.

Configuration is environment-driven, so the test database and upload
directory are set *before* the application modules are imported:

- DATABASE_URL=sqlite:// -> one shared in-memory SQLite connection
- UPLOAD_DIR -> a throwaway temp directory

Every test starts from an empty schema.
"""

import os
import shutil
import tempfile

_UPLOAD_DIR = tempfile.mkdtemp(prefix="baseball-stats-uploads-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = _UPLOAD_DIR
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ENVIRONMENT"] = "test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from baseball_stats_api.db import SessionLocal, engine  # noqa: E402
from baseball_stats_api.main import app  # noqa: E402
from baseball_stats_api.models import metadata  # noqa: E402


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_UPLOAD_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def _fresh_schema():
    metadata.drop_all(engine)
    metadata.create_all(engine)
    yield


@pytest.fixture
def upload_dir():
    return _UPLOAD_DIR


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def register(client, email="coach@example.com", password="secret", name="Coach"):
    """Register a user and return `(auth headers, user dict)`."""
    r = client.post(
        "/api/v1/auth/register",
        data={"email": email, "password": password, "name": name},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]


def create_team(client, headers, name="Rockets", league="Little League", season=2024):
    r = client.post(
        "/api/v1/teams",
        json={"name": name, "league": league, "season": season},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()["team"]


def create_player(client, headers, team_id, name="Casey", number="7", position="SS"):
    r = client.post(
        "/api/v1/players",
        data={"team_id": str(team_id), "name": name, "number": number, "position": position},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()["player"]


def add_game(client, headers, player_id, date="2024-04-01", opponent="Comets", **stats):
    r = client.post(
        "/api/v1/games",
        json={"player_id": player_id, "date": date, "opponent": opponent, **stats},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()["game"]


@pytest.fixture
def owner(client):
    headers, user = register(client, "owner@example.com", name="Owner")
    return headers


@pytest.fixture
def stranger(client):
    headers, user = register(client, "stranger@example.com", name="Stranger")
    return headers
