"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os
from datetime import UTC, datetime

# ---------------------------------------------------------------------------
# The API module builds its engine from DATABASE_URL on first use.  Point it
# at an in-memory SQLite database before anything imports meeple.api.
# ---------------------------------------------------------------------------
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from meeple.config import MeepleConfig  # noqa: E402
from meeple.database.models import Base  # noqa: E402
from meeple.engine.limits import DayBoundary  # noqa: E402
from meeple.services.store import MemoryStore, SqlStore  # noqa: E402

# A fixed noon-UTC instant keeps every award well inside one UTC day.
T0 = datetime(2026, 3, 14, 12, 0, 0, tzinfo=UTC)

UTC_CONFIG = MeepleConfig(day_boundary=DayBoundary.UTC)


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with the records table.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` in the API and by the threaded
    store tests).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def xp_store() -> MemoryStore:
    return MemoryStore("xp")


@pytest.fixture
def post_store() -> MemoryStore:
    return MemoryStore("posts")


@pytest.fixture
def sql_xp_store(db_engine: Engine) -> SqlStore:
    return SqlStore(db_engine, "xp")


@pytest.fixture
def config() -> MeepleConfig:
    return UTC_CONFIG


@pytest.fixture
def client(xp_store, post_store):
    """FastAPI TestClient wired to in-memory stores and UTC day boundaries."""
    from fastapi.testclient import TestClient

    from meeple.api.deps import get_config, get_post_store, get_xp_store
    from meeple.api.main import app

    app.dependency_overrides[get_xp_store] = lambda: xp_store
    app.dependency_overrides[get_post_store] = lambda: post_store
    app.dependency_overrides[get_config] = lambda: UTC_CONFIG
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
