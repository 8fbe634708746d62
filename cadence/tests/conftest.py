"""Fixtures for API tests: test settings, a signed token and a mocked record store."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import UUID

import jwt as pyjwt
import pytest
from fastapi.testclient import TestClient

from cadence.calendar.sources import RecordSource
from cadence.config import get_settings
from cadence.models.records import PhaseRecord, ReminderEvent, SymptomRecord

TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")
JWT_SECRET = "test-secret-that-is-at-least-32-bytes-long"


def make_token(sub: str = str(TEST_USER_ID), expires_in: int = 3600, **claims) -> str:
    payload = {
        "sub": sub,
        "aud": "authenticated",
        "role": "authenticated",
        "email": "viewer@example.com",
        "exp": int(time.time()) + expires_in,
        **claims,
    }
    return pyjwt.encode(payload, JWT_SECRET, algorithm="HS256")


@pytest.fixture
def test_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
    monkeypatch.setenv("SUPABASE_DB_URL", "postgresql://localhost/cadence_test")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", JWT_SECRET)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def utc_today():
    return datetime.now(timezone.utc).date()


@pytest.fixture
def record_store(utc_today) -> AsyncMock:
    """Mocked store with a luteal, logged, supplemented today."""
    store = AsyncMock(spec=RecordSource)
    store.get_phase_forecasts.return_value = [PhaseRecord(date=utc_today, phase="luteal")]
    store.get_cycle_events.return_value = []
    store.get_symptom_logs.return_value = [
        SymptomRecord(date=utc_today, mood=4, cramps=2, headache=True)
    ]
    store.get_training_logs.return_value = []
    store.get_reminder_events.return_value = [ReminderEvent(date=utc_today, status="taken")]
    return store


@pytest.fixture
def client(test_env, record_store: AsyncMock) -> TestClient:
    from cadence.dependencies import get_record_source
    from cadence.main import create_app

    app = create_app()
    app.dependency_overrides[get_record_source] = lambda: record_store
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}
