"""
Test fixtures for workout-tracker-api.

Supabase is replaced by an in-memory fake and Stripe by a MagicMock so the
suite runs offline and deterministically.
"""

import sys
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ and tests/ importable
for p in {SRC, Path(__file__).resolve().parent}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from fakes import FakeSupabase
from workout_tracker_api.auth import get_current_user
from workout_tracker_api.config import Settings
from workout_tracker_api.main import create_app


TEST_USER_ID = "test-user-123"

# Monday 19 October 2026 .. Sunday 25 October 2026
WEEK_MONDAY = date(2026, 10, 19)
WEEK_WEDNESDAY = date(2026, 10, 21)
WEEK_SUNDAY = date(2026, 10, 25)


async def mock_get_current_user() -> str:
    """Mock auth dependency that returns a test user."""
    return TEST_USER_ID


# ---------------------------------------------------------------------------
# Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set mock environment variables for tests."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "test-supabase-key")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-0123")
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
    monkeypatch.setenv("APP_URL", "https://app.example.com")


# ---------------------------------------------------------------------------
# External services
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    return Settings()


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def mock_stripe() -> MagicMock:
    """Stripe client whose checkout sessions are created as paid-on-retrieve."""
    client = MagicMock()
    client.checkout.sessions.create.return_value = MagicMock(id="cs_test_123")
    client.checkout.sessions.retrieve.return_value = {
        "id": "cs_test_123",
        "payment_status": "paid",
        "payment_intent": "pi_test_456",
        "metadata": {"post_id": "post-1", "user_id": TEST_USER_ID},
    }
    return client


# ---------------------------------------------------------------------------
# Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def app(test_settings, fake_supabase, mock_stripe):
    application = create_app(test_settings, supabase_client=fake_supabase, stripe_client=mock_stripe)
    application.dependency_overrides[get_current_user] = mock_get_current_user
    return application


@pytest.fixture
def client(app) -> TestClient:
    """Per-test FastAPI TestClient with auth overridden."""
    return TestClient(app)


@pytest.fixture
def unauthenticated_client(test_settings, fake_supabase, mock_stripe) -> TestClient:
    return TestClient(create_app(test_settings, supabase_client=fake_supabase, stripe_client=mock_stripe))
