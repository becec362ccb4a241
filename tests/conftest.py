"""Shared test fixtures: in-memory SQLite session, repository and API client."""
import os

# Must be set before shipcatalog.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shipcatalog.database import get_db
from shipcatalog.main import app
from shipcatalog.models import Base
from shipcatalog.models.base import ShipTypeEnum
from shipcatalog.repository import ShipRepository


@pytest.fixture
def db():
    """In-memory SQLite database with all tables, shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def repo(db):
    return ShipRepository(db)


@pytest.fixture
def api_client(db):
    """TestClient with the DB dependency overridden to use the in-memory session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def valid_candidate(**overrides):
    """Return a valid create candidate (model field names) with optional overrides."""
    candidate = {
        "name": "Ava",
        "planet": "Earth",
        "ship_type": ShipTypeEnum.TRANSPORT,
        "prod_date": datetime(3000, 1, 1),
        "is_used": False,
        "speed": 0.5,
        "crew_size": 100,
    }
    candidate.update(overrides)
    return candidate


def plain_ship(id, **overrides):
    """Lightweight ship-shaped object for the pure query functions."""
    fields = {
        "id": id,
        "name": f"Ship {id}",
        "planet": "Earth",
        "ship_type": ShipTypeEnum.TRANSPORT,
        "prod_date": datetime(3000, 1, 1),
        "is_used": False,
        "speed": 0.5,
        "crew_size": 100,
        "rating": 2.0,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)
