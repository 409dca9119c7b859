import time

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from wellnest.config import settings
from wellnest.database import connection
from wellnest.database.tables import metadata
from wellnest.main import app
from wellnest.models.schemas import EpdsScore

JWT_SECRET = "wellnest-test-jwt-secret-0123456789abcdef"
USER_ID = "7b1d5c1e-2a51-4d44-9a7e-2f0f4c1b9a01"
OTHER_USER_ID = "0c9e8b4a-6f6c-4b8e-8f3a-1d2e3f4a5b6c"

ALL_ZERO_RESPONSES = {
    "laughing": 0, "enjoyment": 0, "blaming": 0, "anxious": 0, "scared": 0,
    "overwhelmed": 0, "sleeping": 0, "sad": 0, "crying": 0, "selfharm": 0,
}


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class RecordingProvider:
    """Score provider returning a fixed result and remembering what it was asked"""

    def __init__(self, result=None, error=None):
        self.result = result or EpdsScore(epds_score=7, risk_level="Low Risk")
        self.error = error
        self.calls = []

    def score(self, responses):
        self.calls.append(list(responses))
        if self.error is not None:
            raise self.error
        return self.result


def make_token(user_id=USER_ID, secret=JWT_SECRET, **claims):
    payload = {"sub": user_id, "aud": "authenticated", "exp": int(time.time()) + 3600, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id=USER_ID):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", JWT_SECRET)
    monkeypatch.setattr(settings, "ALLOW_UNVERIFIED_TOKENS", False)


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    """File-backed SQLite database with the check-in tables"""
    path = tmp_path / "wellnest.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    metadata.create_all(sync_engine)
    sync_engine.dispose()

    monkeypatch.setattr(connection, "engine", None)
    monkeypatch.setattr(connection, "async_session", None)
    assert connection.init_database(f"sqlite:///{path}")
    return f"sqlite:///{path}"


@pytest.fixture
def sync_engine(database_url):
    engine = create_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def session_maker(database_url):
    return connection.get_session()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
