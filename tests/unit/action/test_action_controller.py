from typing import Callable
from unittest.mock import AsyncMock
import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from matti.action import Action, ActionStatus, FollowUp
from matti.action.action_controller import ActionController
from matti.action.action_models import ActionCreateRequest, ActionStats
from matti.common.exceptions import ConflictException, NotFoundException
from matti.common.models import ThemeId
from matti.user import User


@pytest.fixture
def client(build_app: Callable[..., FastAPI], fake_user: User, mock_action_service: AsyncMock) -> TestClient:
    return TestClient(build_app([ActionController], user=fake_user))


@pytest.fixture
def headers(fake_user: User) -> dict[str, str]:
    return {"X-Forwarded-User": fake_user.username}


def test_save_action_returns_follow_ups(client: TestClient, headers, fake_user: User, mock_action_service: AsyncMock):
    action = Action(id=uuid.uuid4(), user_id=fake_user.id, theme_id=ThemeId.FRIENDS, action_text="Sorry zeggen")
    follow_up = FollowUp(id=uuid.uuid4(), action_id=action.id, scheduled_for=action.created_at)
    mock_action_service.save_action.return_value = (action, [follow_up])

    response = client.post("/api/v1/actions", json={"theme_id": "friends", "action_text": "Sorry zeggen"}, headers=headers)

    assert response.status_code == 200, response.json()
    data = response.json()
    assert data["id"] == str(action.id)
    assert [f["id"] for f in data["follow_ups"]] == [str(follow_up.id)]
    mock_action_service.save_action.assert_awaited_once_with(fake_user, ActionCreateRequest(theme_id=ThemeId.FRIENDS, action_text="Sorry zeggen"))


def test_save_action_requires_text(client: TestClient, headers, mock_action_service: AsyncMock):
    response = client.post("/api/v1/actions", json={"theme_id": "friends", "action_text": ""}, headers=headers)

    assert response.status_code == 422
    mock_action_service.save_action.assert_not_awaited()


def test_list_actions_filters_by_status(client: TestClient, headers, fake_user: User, mock_action_service: AsyncMock):
    mock_action_service.get_actions.return_value = []

    response = client.get("/api/v1/actions", params={"status": "pending"}, headers=headers)

    assert response.status_code == 200, response.json()
    mock_action_service.get_actions.assert_awaited_once_with(fake_user, ActionStatus.PENDING)


def test_action_stats(client: TestClient, headers, mock_action_service: AsyncMock):
    mock_action_service.get_stats.return_value = ActionStats(total=4, pending=1, completed=3, completion_rate=75)

    response = client.get("/api/v1/actions/stats", headers=headers)

    assert response.status_code == 200, response.json()
    assert response.json()["completion_rate"] == 75


def test_update_status(client: TestClient, headers, fake_user: User, mock_action_service: AsyncMock):
    action = Action(id=uuid.uuid4(), user_id=fake_user.id, theme_id=ThemeId.SCHOOL, action_text="Leren", status=ActionStatus.COMPLETED)
    mock_action_service.update_status.return_value = action

    response = client.put(f"/api/v1/actions/{action.id}/status", json={"status": "completed"}, headers=headers)

    assert response.status_code == 200, response.json()
    assert response.json()["status"] == "completed"
    mock_action_service.update_status.assert_awaited_once_with(fake_user, action.id, ActionStatus.COMPLETED)


def test_invalid_transition_returns_409(client: TestClient, headers, mock_action_service: AsyncMock):
    mock_action_service.update_status.side_effect = ConflictException("Action is already completed")

    response = client.put(f"/api/v1/actions/{uuid.uuid4()}/status", json={"status": "cancelled"}, headers=headers)

    assert response.status_code == 409


def test_unknown_action_returns_404(client: TestClient, headers, mock_action_service: AsyncMock):
    mock_action_service.update_status.side_effect = NotFoundException("Action was not found!")

    response = client.put(f"/api/v1/actions/{uuid.uuid4()}/status", json={"status": "completed"}, headers=headers)

    assert response.status_code == 404
