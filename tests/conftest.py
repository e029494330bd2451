"""
Pytest configuration for web service tests
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("CSRF_SECRET", "test-csrf-secret")

import pytest
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient


@pytest.fixture
def app():
    """FastAPI application with dependency overrides reset around each test"""
    from app.main import app as fastapi_app
    fastapi_app.dependency_overrides.clear()
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Test client for anonymous requests"""
    return TestClient(app)


@pytest.fixture
def test_user() -> Dict[str, Any]:
    """Signed-in user as returned by get_current_user"""
    return {
        "id": "user-123",
        "email": "jane@example.com",
        "email_confirmed": True,
        "metadata": {"first_name": "Jane", "last_name": "Doe"},
        "access_token": "access-token-abc",
        "refresh_token": "refresh-token-abc",
    }


@pytest.fixture
def auth_client(app, client, test_user):
    """Test client whose requests resolve to ``test_user``"""
    from app.utils.dependencies import get_current_user, get_optional_user
    app.dependency_overrides[get_current_user] = lambda: test_user
    app.dependency_overrides[get_optional_user] = lambda: test_user
    return client


@pytest.fixture
def sample_task_row() -> Dict[str, Any]:
    """Row of the tasks table"""
    return {
        "id": "task-1",
        "title": "Write report",
        "description": "Quarterly numbers",
        "status": "pending",
        "priority": "high",
        "due_date": "2026-11-01",
        "created_at": "2026-10-01T09:00:00+00:00",
        "updated_at": "2026-10-01T09:00:00+00:00",
        "user_id": "user-123",
    }


@pytest.fixture
def mock_query():
    """Chainable query builder; every builder method returns the same mock"""
    query = MagicMock()
    for method in ("select", "insert", "update", "delete", "eq", "order", "limit"):
        getattr(query, method).return_value = query
    return query


@pytest.fixture
def mock_supabase(mock_query):
    """Supabase client wrapper with async auth calls and a fake table"""
    supabase = MagicMock()
    supabase.table.return_value = mock_query
    supabase.admin_table.return_value = mock_query
    supabase.execute = AsyncMock(return_value=MagicMock(data=[]))
    supabase.sign_in = AsyncMock()
    supabase.sign_up = AsyncMock()
    supabase.sign_out = AsyncMock(return_value={"success": True})
    supabase.update_user = AsyncMock(return_value={"success": True, "user": None})
    supabase.delete_user = AsyncMock(return_value={"success": True})
    supabase.get_user = AsyncMock(return_value=None)
    supabase.refresh_session = AsyncMock(return_value={"success": False, "error": "expired"})
    return supabase


def fetch_csrf_token(client: TestClient) -> str:
    """Render a page and return the CSRF token the server set as a cookie"""
    response = client.get("/")
    assert response.status_code == 200
    return client.cookies.get("csrf_token")


@pytest.fixture
def csrf_token(client) -> str:
    """Valid CSRF token, with its cookie already in the client's jar"""
    return fetch_csrf_token(client)
