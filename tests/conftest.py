"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest

from shared.config import get_settings
from shared.database import reset_client_cache
from shared.models import Session
from tests.fakes import FakeIdentityProvider, InMemoryProfileStore


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset cached settings and client before and after each test."""
    get_settings.cache_clear()
    reset_client_cache()
    yield
    get_settings.cache_clear()
    reset_client_cache()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"


@pytest.fixture
def session(test_user_id: str, test_user_email: str) -> Session:
    """A signed-in session for the test user."""
    return Session(user_id=test_user_id, email=test_user_email)


@pytest.fixture
def identity() -> FakeIdentityProvider:
    """Identity provider with no session."""
    return FakeIdentityProvider()


@pytest.fixture
def store() -> InMemoryProfileStore:
    """Empty profile store."""
    return InMemoryProfileStore()
