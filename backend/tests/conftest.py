"""Shared fixtures: in-memory SQLite database and an authenticated TestClient."""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="freshtrack-uploads-"))

from datetime import date, timedelta

import fakeredis
import fakeredis.aioredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import freshtrack.models  # noqa: F401
from freshtrack.config import get_settings
from freshtrack.database import Base, get_db
from freshtrack.main import app
from freshtrack.models.food_item import FoodItem
from freshtrack.models.user import User
from freshtrack.models.waste import CarbonFootprint
from freshtrack.services.events import broker
from freshtrack.utils.auth import get_current_user


@pytest.fixture(autouse=True)
def redis_server(monkeypatch):
    """In-memory Redis shared by every client the broker opens during a test."""
    server = fakeredis.FakeServer()
    monkeypatch.setattr(broker, "_client", fakeredis.FakeRedis(server=server))
    monkeypatch.setattr(broker, "async_client", lambda: fakeredis.aioredis.FakeRedis(server=server))
    return server


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(get_settings(), "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def user(db):
    u = User(email="cook@example.com", name="Cook", password_hash="x")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def other_user(db):
    u = User(email="other@example.com", name="Other", password_hash="x")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def make_item(db, user, today):
    """Factory for food items owned by `user` (or `owner`), expiring `days` from today."""

    def _make(name="Milk", days=5, category="dairy", quantity=1.0, unit="pcs", owner=None):
        item = FoodItem(
            user_id=(owner or user).id,
            name=name,
            category=category,
            quantity=quantity,
            unit=unit,
            expiry_date=today + timedelta(days=days),
            added_date=today,
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make


@pytest.fixture
def carbon_data(db):
    rows = [
        CarbonFootprint(category="dairy", carbon_per_kg=3.2),
        CarbonFootprint(category="meat", carbon_per_kg=27.0),
    ]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
def anon_client(db):
    """TestClient using the test database but real token auth."""

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def client(anon_client, user):
    """TestClient authenticated as `user`."""
    app.dependency_overrides[get_current_user] = lambda: user
    return anon_client
