# tests/conftest.py
"""Shared fixtures: a fresh SQLite database per test, services and API client on top."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before fleet.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from fleet.database import build_engine, create_tables, get_db
from fleet.main import app
from fleet.services import assignment_service, client_service, user_service, vehicle_service
from fleet.services.auth_service import create_access_token


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'fleet.db'}")
    create_tables(bind=engine)
    yield engine
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
def make_vehicle(db):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "license_plate": f"{counter['n']:05d}-A-1",
            "make": "Dacia",
            "model": "Logan",
            "type": "sedan",
            "location": "Casablanca",
        }
        fields.update(overrides)
        return vehicle_service.create_vehicle(db, fields)

    return _make


@pytest.fixture
def make_client(db):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "first_name": "Client",
            "last_name": f"No{counter['n']}",
            "cin": f"BK{counter['n']:06d}",
            "type": "new",
            "location": "Rabat",
            "phone": "+212600000000",
        }
        fields.update(overrides)
        return client_service.create_client(db, fields)

    return _make


@pytest.fixture
def make_assignment(db, make_vehicle, make_client):
    def _make(vehicle=None, client=None, **kwargs):
        vehicle = vehicle or make_vehicle()
        client = client or make_client()
        return assignment_service.create_assignment(db, vehicle.id, client.id, **kwargs)

    return _make


@pytest.fixture
def api(session_factory):
    """Unauthenticated TestClient bound to the per-test database."""

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def operator(db):
    return user_service.create_user(db, "operator", "secret123")


@pytest.fixture
def auth_api(api, operator):
    """TestClient carrying a valid bearer token."""
    api.headers["Authorization"] = f"Bearer {create_access_token(operator.id)}"
    return api
