"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
Every test gets a fresh user id, so rows from other tests never match its
queries. The clock is a FixedClock that tests move day by day.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_goalstreak.db")

import uuid
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from goalstreak.core.clock import FixedClock, get_clock
from goalstreak.db.base import Base, enable_sqlite_transactions, get_db
from goalstreak.main import app
from goalstreak.models.goal import Goal

SQLITE_URL = "sqlite:///./test_goalstreak.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
enable_sqlite_transactions(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2026, 3, 10)   # a Tuesday


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def clock():
    return FixedClock(TODAY)


@pytest.fixture()
def user_id():
    return f"user-{uuid.uuid4().hex[:12]}"


@pytest.fixture()
def client(db, clock):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_goal(db, user_id):
    """Insert a goal directly; keyword arguments override the defaults."""
    def _make(**overrides) -> Goal:
        fields = {
            "user_id": user_id,
            "goal_type": "gym_consistency",
            "target_amount": Decimal("10"),
            "current_amount": Decimal("0"),
            "target_unit": "sessions",
            "start_date": TODAY,
            "is_active": True,
        }
        fields.update(overrides)
        goal = Goal(**fields)
        db.add(goal)
        db.commit()
        db.refresh(goal)
        return goal
    return _make
