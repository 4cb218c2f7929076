from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch
import uuid

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
import pytest

from matti.common.middlewares import UserPopulationMiddleware
from matti.user import User


@pytest.fixture
def user_service():
    service = AsyncMock()
    with patch("matti.common.middlewares.ServiceFactory.get_user_service", new=Mock(return_value=service)):
        yield service


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.add_middleware(UserPopulationMiddleware)

    @app.get("/api/v1/whoami")
    async def whoami(request: Request):
        user = request.state.user
        return {"username": user.username if user else None}

    @app.post("/api/v1/users")
    async def register(request: Request):
        return {"username": None if request.state.user is None else request.state.user.username}

    return TestClient(app)


def test_known_user_is_populated(client: TestClient, user_service: AsyncMock):
    user_service.get_user_by_username.return_value = User(id=uuid.uuid4(), username="sam", created_at=datetime.now(timezone.utc), updated_at=datetime.now(timezone.utc))

    response = client.get("/api/v1/whoami", headers={"X-Forwarded-User": "sam"})

    assert response.json() == {"username": "sam"}
    user_service.get_user_by_username.assert_awaited_once_with("sam")


def test_missing_header_leaves_user_empty(client: TestClient, user_service: AsyncMock):
    response = client.get("/api/v1/whoami")

    assert response.json() == {"username": None}
    user_service.get_user_by_username.assert_not_awaited()


def test_registration_skips_user_lookup(client: TestClient, user_service: AsyncMock):
    response = client.post("/api/v1/users", headers={"X-Forwarded-User": "sam"})

    assert response.json() == {"username": None}
    user_service.get_user_by_username.assert_not_awaited()
