from typing import Callable
from unittest.mock import AsyncMock
import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from matti.common.exceptions import ConflictException, LLMResponseException, NotFoundException
from matti.goals import Goal, GoalStatus, GoalType
from matti.goals.goal_controller import GoalController
from matti.goals.goal_models import FinalizeGoalResponse, GoalOverview
from matti.user import User


@pytest.fixture
def client(build_app: Callable[..., FastAPI], fake_user: User, mock_goal_service: AsyncMock) -> TestClient:
    return TestClient(build_app([GoalController], user=fake_user))


@pytest.fixture
def headers(fake_user: User) -> dict[str, str]:
    return {"X-Forwarded-User": fake_user.username}


def test_start_custom_goal(client: TestClient, headers, fake_user: User, mock_goal_service: AsyncMock):
    goal = Goal(id=uuid.uuid4(), user_id=fake_user.id, title="Vaker sporten", goal_type=GoalType.CUSTOM)
    mock_goal_service.start_draft_goal.return_value = goal

    response = client.post("/api/v1/goals", json={"goal_type": "custom", "custom_text": "Vaker sporten"}, headers=headers)

    assert response.status_code == 200, response.json()
    assert response.json()["goal_id"] == str(goal.id)
    assert response.json()["title"] == "Vaker sporten"
    mock_goal_service.start_draft_goal.assert_awaited_once_with(fake_user, GoalType.CUSTOM, "Vaker sporten")


def test_finalize_goal(client: TestClient, headers, fake_user: User, mock_goal_service: AsyncMock):
    goal_id = uuid.uuid4()
    action_ids = [uuid.uuid4(), uuid.uuid4()]
    mock_goal_service.finalize_goal.return_value = FinalizeGoalResponse(goal_id=goal_id, intro="Zet hem op!", step_count=2, action_ids=action_ids)

    response = client.post(f"/api/v1/goals/{goal_id}/finalize", json={"clarification_context": "Ik slaap slecht"}, headers=headers)

    assert response.status_code == 200, response.json()
    assert response.json()["step_count"] == 2
    mock_goal_service.finalize_goal.assert_awaited_once_with(fake_user, goal_id, "Ik slaap slecht")


def test_finalize_non_draft_returns_409(client: TestClient, headers, mock_goal_service: AsyncMock):
    mock_goal_service.finalize_goal.side_effect = ConflictException("Goal is not in draft status")

    response = client.post(f"/api/v1/goals/{uuid.uuid4()}/finalize", json={"clarification_context": "x"}, headers=headers)

    assert response.status_code == 409


def test_unusable_plan_returns_502(client: TestClient, headers, mock_goal_service: AsyncMock):
    mock_goal_service.finalize_goal.side_effect = LLMResponseException("The goal plan could not be parsed")

    response = client.post(f"/api/v1/goals/{uuid.uuid4()}/finalize", json={"clarification_context": "x"}, headers=headers)

    assert response.status_code == 502


def test_active_route_is_not_taken_for_an_id(client: TestClient, headers, fake_user: User, mock_goal_service: AsyncMock):
    overview = GoalOverview(id=uuid.uuid4(), user_id=fake_user.id, title="Beter slapen", goal_type=GoalType.SLEEP, status=GoalStatus.ACTIVE)
    mock_goal_service.get_active_goals.return_value = [overview]

    response = client.get("/api/v1/goals/active", headers=headers)

    assert response.status_code == 200, response.json()
    assert response.json()[0]["progress"] == {"completed": 0, "total": 0}
    mock_goal_service.get_goal.assert_not_awaited()


def test_unknown_goal_returns_404(client: TestClient, headers, mock_goal_service: AsyncMock):
    mock_goal_service.get_goal.side_effect = NotFoundException("Goal was not found!")

    response = client.get(f"/api/v1/goals/{uuid.uuid4()}", headers=headers)

    assert response.status_code == 404
