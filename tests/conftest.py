"""Shared test fixtures.

Provides seeded profiles, an in-memory repository, a FastAPI ``test_client``
wired to that repository, and mock Supabase client fixtures for the health
endpoint.
"""

import os
from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-service-role-key")

from app.db.memory import InMemoryRepository  # noqa: E402
from app.models.profile import UserProfile  # noqa: E402
from tests.factories import ALICE_ID, BOB_ID, CAROL_ID, DAVE_ID, make_profile  # noqa: E402


@pytest.fixture()
def profiles() -> list[UserProfile]:
    """Four founders, in signup order."""
    return [
        make_profile("Alice", "Backend Engineer", ["React", "Node"], ALICE_ID),
        make_profile("Bob", "Sales Lead", ["React", "Sales"], BOB_ID),
        make_profile("Carol", "Designer", ["Figma"], CAROL_ID),
        make_profile("Dave", "CTO", ["React", "Node", "Python"], DAVE_ID),
    ]


@pytest.fixture()
def repository(profiles: list[UserProfile]) -> InMemoryRepository:
    return InMemoryRepository(profiles)


@pytest.fixture()
def test_client(repository: InMemoryRepository) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient backed by the in-memory repository."""
    from app.db.repository import get_repository
    from app.main import app

    app.dependency_overrides[get_repository] = lambda: repository
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def mock_supabase_module() -> Generator[MagicMock, None, None]:
    """Patch the Supabase client at module level in the health router."""
    mock_client = MagicMock()
    mock_table = MagicMock()
    mock_select = MagicMock()
    mock_limit = MagicMock()

    mock_client.table.return_value = mock_table
    mock_table.select.return_value = mock_select
    mock_select.limit.return_value = mock_limit
    mock_limit.execute.return_value = MagicMock()  # non-None result

    with patch("app.routers.health.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def mock_supabase_disconnected() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` to simulate a disconnected database."""
    with patch(
        "app.routers.health.get_supabase",
        side_effect=Exception("Connection refused"),
    ):
        yield MagicMock()
