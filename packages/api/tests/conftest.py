# This project was developed with assistance from AI tools.
"""Shared fixtures for API unit tests.

Routes run against the real app with the DB session and caller identity
replaced through ``dependency_overrides``.  Services are patched per test.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from db import get_db
from db.enums import UserRole
from fastapi.testclient import TestClient

from lending.main import app
from lending.middleware.auth import get_current_user
from lending.schemas.auth import UserContext

REVIEWER = UserContext(user_id="officer-1", role=UserRole.COMPLIANCE_OFFICER, name="Amina")


@pytest.fixture
def mock_session():
    """AsyncMock session whose sync methods (add, add_all, expunge) stay synchronous."""
    session = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    session.expunge = MagicMock()
    return session


@pytest.fixture
def reviewer() -> UserContext:
    return REVIEWER


@pytest.fixture
def client(mock_session, reviewer):
    async def _get_db():
        yield mock_session

    async def _get_current_user():
        return reviewer

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_user] = _get_current_user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
