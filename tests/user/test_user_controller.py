from datetime import datetime, timezone
from typing import Callable
from unittest.mock import AsyncMock
import uuid
from fastapi import FastAPI

from fastapi.testclient import TestClient
from matti.common.controller import BaseController
from matti.common.exceptions import ConflictException
from matti.user.user_controller import UserController
from matti.user.user_models import UserCreateRequest
from matti.user import User


def test_create_user_returns_200(build_app: Callable[[list[type[BaseController]]], FastAPI], mock_user_service: AsyncMock):
    expected_user = User(
        id=uuid.uuid4(),
        username="testuser",
        name="Sam",
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )
    mock_user_service.add_user.return_value = expected_user
    app = build_app([UserController])
    client = TestClient(app)

    payload = UserCreateRequest(username="testuser", name="Sam").model_dump()
    response = client.post("/api/v1/users", json=payload)

    assert response.status_code == 200, response.json()
    data = response.json()
    assert data["username"] == "testuser"
    assert data["name"] == "Sam"

    mock_user_service.add_user.assert_awaited_once_with(UserCreateRequest(username="testuser", name="Sam"))


def test_create_user_rejects_short_username(build_app: Callable[[list[type[BaseController]]], FastAPI], mock_user_service: AsyncMock):
    client = TestClient(build_app([UserController]))

    response = client.post("/api/v1/users", json={"username": "ab"})

    assert response.status_code == 422
    mock_user_service.add_user.assert_not_awaited()


def test_duplicate_username_returns_409(build_app: Callable[[list[type[BaseController]]], FastAPI], mock_user_service: AsyncMock):
    mock_user_service.add_user.side_effect = ConflictException("Username testuser is already taken")
    client = TestClient(build_app([UserController]))

    response = client.post("/api/v1/users", json={"username": "testuser"})

    assert response.status_code == 409
    assert response.json()["detail"] == "Username testuser is already taken"
