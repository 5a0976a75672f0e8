"""Shared pytest fixtures and configuration."""

import os
import pytest

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from ktmrental.services import supabase_client  # noqa: E402
from tests.utils.fake_supabase import FakeSupabase  # noqa: E402


@pytest.fixture
def fake_db(monkeypatch):
    """In-memory Supabase installed as the client singleton."""
    db = FakeSupabase()
    monkeypatch.setattr(supabase_client, "_client", db)
    return db


@pytest.fixture
def admin_claims():
    return {
        "sub": "user_admin_01",
        "email": "admin@example.com",
        "public_metadata": {"role": "admin"},
        "username": "site-admin",
    }


@pytest.fixture
def user_claims():
    return {
        "sub": "user_owner_01",
        "email": "owner@example.com",
        "public_metadata": {},
        "first_name": "Sita",
        "last_name": "Shrestha",
    }


@pytest.fixture
def other_user_claims():
    return {
        "sub": "user_other_02",
        "email": "other@example.com",
    }


@pytest.fixture
def room_a():
    """Property from the owner walkthrough."""
    return {
        "title": "Room A",
        "location": "Patan",
        "price": 10000,
        "bedrooms": 1,
        "bathrooms": 1,
    }
