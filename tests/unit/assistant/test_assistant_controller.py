from typing import Callable
from unittest.mock import AsyncMock
import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from matti.assistant.assistant_controller import AssistantController
from matti.assistant.assistant_models import AssistantMessageRequest, AssistantReply, WelcomeResponse
from matti.common.exceptions import ConflictException
from matti.safety.bullying_detection import BullyingDetectionResult
from matti.safety.crisis_detection import CrisisDetectionResult
from matti.user import User


@pytest.fixture
def client(build_app: Callable[..., FastAPI], fake_user: User, mock_assistant_service: AsyncMock) -> TestClient:
    return TestClient(build_app([AssistantController], user=fake_user))


@pytest.fixture
def headers(fake_user: User) -> dict[str, str]:
    return {"X-Forwarded-User": fake_user.username}


def test_send_message(client: TestClient, headers, fake_user: User, mock_assistant_service: AsyncMock):
    conversation_id = uuid.uuid4()
    mock_assistant_service.send_message.return_value = AssistantReply(
        conversation_id=conversation_id,
        reply="Vertel!",
        message_count=2,
        crisis=CrisisDetectionResult(),
        bullying=BullyingDetectionResult(),
    )

    response = client.post("/api/v1/assistant/messages", json={"conversation_id": str(conversation_id), "message": "Hoi"}, headers=headers)

    assert response.status_code == 200, response.json()
    assert response.json()["reply"] == "Vertel!"
    assert response.json()["crisis"]["detected"] is False
    mock_assistant_service.send_message.assert_awaited_once_with(fake_user, AssistantMessageRequest(conversation_id=conversation_id, message="Hoi"))


def test_empty_message_is_rejected(client: TestClient, headers, mock_assistant_service: AsyncMock):
    response = client.post("/api/v1/assistant/messages", json={"conversation_id": str(uuid.uuid4()), "message": ""}, headers=headers)

    assert response.status_code == 422
    mock_assistant_service.send_message.assert_not_awaited()


def test_archived_conversation_returns_409(client: TestClient, headers, mock_assistant_service: AsyncMock):
    mock_assistant_service.send_message.side_effect = ConflictException("Conversation is archived and read-only")

    response = client.post("/api/v1/assistant/messages", json={"conversation_id": str(uuid.uuid4()), "message": "Hoi"}, headers=headers)

    assert response.status_code == 409


def test_welcome(client: TestClient, headers, mock_assistant_service: AsyncMock):
    mock_assistant_service.welcome.return_value = WelcomeResponse(message="Hoi Sam! Waar wil je het over hebben?", assistant_name="Matti", logo="/logo.svg", primary_color="#000")

    response = client.get("/api/v1/assistant/welcome", headers=headers)

    assert response.status_code == 200, response.json()
    assert response.json()["assistant_name"] == "Matti"
