"""Shared fixtures.

The app is built without running its lifespan, so no Cassandra connection is
attempted. Route tests install mocked services on `app.state` directly.
"""

from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import pytest
from cassandra.cluster import Session
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.auth.security import create_access_token
from src.main import create_app


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    # raise_server_exceptions=False lets the 500 handler answer
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def mock_session() -> Mock:
    """Mock Cassandra session with awaitable aexecute."""
    session = Mock(spec=Session)
    session.prepare = Mock(return_value=Mock())
    session.aexecute = AsyncMock(return_value=Mock())
    return session


@pytest.fixture
def actor_id() -> UUID:
    return uuid4()


@pytest.fixture
def auth_headers(actor_id: UUID) -> dict[str, str]:
    token = create_access_token({"sub": str(actor_id), "email": "ann@example.com"})
    return {"Authorization": f"Bearer {token}"}
