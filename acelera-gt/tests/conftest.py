"""
Shared pytest fixtures.

The environment is pinned before any project module is imported: an in-memory
SQLite database, Celery tasks executed inline, no webhooks and no Gemini key.
"""

import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["CELERY_ALWAYS_EAGER"] = "true"
os.environ["GEMINI_API_KEY"] = ""
os.environ.pop("WEBHOOK_URL_CYCLE_CLOSED", None)
os.environ.pop("WEBHOOK_URL_TIER_REACHED", None)
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient

import config
from database import SessionLocal, init_db
from models import CycleArchive, PointsLedger
from schemas import Goals, Seller
from store import AppState, DataStore


@pytest.fixture
def goals():
    """The default goal configuration (sales lendária 7000, points metinha 800)."""
    return Goals(**config.DEFAULT_GOALS)


@pytest.fixture
def roster():
    return [
        Seller(id="1", name="Ana", sales_value=7500, ticket_average=160, pa=2.6, points=900),
        Seller(id="2", name="Bruno", sales_value=4500, ticket_average=120, pa=1.5, points=500, extra_points=100),
        Seller(id="3", name="Carla", sales_value=5200, ticket_average=185, pa=3.1, points=1600, extra_points=500),
    ]


@pytest.fixture
def store(roster, goals):
    return DataStore(AppState(sellers=roster, goals=goals, missions=[
        {
            "id": "m1",
            "name": "Kit de limpeza",
            "start_date": "2024-07-01",
            "end_date": "2099-12-31",
            "reward_type": "points",
            "reward_value": 100,
        },
        {
            "id": "m2",
            "name": "Vitrine da semana",
            "start_date": "2024-07-01",
            "end_date": "2099-12-31",
            "reward_type": "cash",
            "reward_value": 30,
        },
    ]))


@pytest.fixture
def db_session():
    init_db()
    session = SessionLocal()
    yield session
    session.query(PointsLedger).delete()
    session.query(CycleArchive).delete()
    session.commit()
    session.close()


@pytest.fixture
def client(store, db_session):
    from dependencies import get_store
    from main import app

    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
