"""
Shared fixtures: every test gets its own temporary SQLite store.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from apps.blog.main import create_app
from apps.blog.repository import PostRepository
from apps.shared.config import Settings
from apps.shared.database import Database


def make_settings(database_url: str, environment: str = "development") -> Settings:
    return Settings(
        database_url=database_url,
        environment=environment,
        frontend_url=None,
        log_level="INFO",
        database_echo=False,
    )


@pytest.fixture()
def database(tmp_path):
    """Initialised store; all tables are dropped and connections closed afterwards."""
    db = Database(f"sqlite:///{tmp_path / 'blog.db'}", echo=False)
    db.init()
    yield db
    db.teardown()
    db.dispose()


@pytest.fixture()
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture()
def repo(session):
    return PostRepository(session)


@pytest.fixture()
def settings(database):
    return make_settings(database.url)


@pytest.fixture()
def client(database, settings):
    app = create_app(database, settings=settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def post_payload():
    """Factory for valid creation payloads."""
    counter = iter(range(1, 10_000))

    def _make(**overrides) -> dict:
        n = next(counter)
        payload = {
            "author": {"firstName": f"First{n}", "lastName": f"Last{n}"},
            "title": f"Post title {n}",
            "content": f"Body of post {n}.",
        }
        payload.update(overrides)
        return payload

    return _make
