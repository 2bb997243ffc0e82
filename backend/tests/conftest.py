from __future__ import annotations

import os

# Settings are read at import time; tests never touch a real database or Redis.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("INTERNAL_ALLOWED_HOSTS", '["127.0.0.1", "testclient"]')

from datetime import datetime
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from availability.database import get_db
from availability.main import app
from availability.models import (
    AvailabilityRules,
    Base,
    Businesses,
    Providers,
    PublicAvailability,
)
from availability.services.slots.clock import fixed_clock, get_clock

# 2025-01-10 is a Friday
NOW = datetime(2025, 1, 10, 10, 0)


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(autouse=True)
def redis_mock():
    # Recompute requests go to Redis; keep them in memory.
    with patch("availability.services.events.redis_client") as mock:
        yield mock


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_clock] = lambda: fixed_clock(NOW)
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_provider(db):
    def _make(
        calendar_id: str = "cal-1",
        notice_hours: int | None = 24,
        business_name: str = "Acme Movers",
    ) -> Providers:
        business = Businesses(name=business_name, min_booking_notice_hours=notice_hours)
        db.add(business)
        db.flush()
        provider = Providers(
            business_id=business.id,
            calendar_id=calendar_id,
            display_name=f"{business_name} crew",
        )
        db.add(provider)
        db.commit()
        return provider

    return _make


@pytest.fixture
def provider(make_provider) -> Providers:
    return make_provider()


@pytest.fixture
def add_cache_row(db):
    def _add(calendar_id: str, date: str, morning: str | None, afternoon: str | None):
        db.add(PublicAvailability(
            calendar_id=calendar_id,
            date=date,
            morning_status=morning,
            afternoon_status=afternoon,
        ))
        db.commit()

    return _add


@pytest.fixture
def add_rule(db):
    def _add(provider: Providers, weekday: int = 1):
        db.add(AvailabilityRules(provider_id=provider.id, weekday=weekday))
        db.commit()

    return _add
