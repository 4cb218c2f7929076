from datetime import datetime, timezone
from typing import Callable, Generator
from unittest.mock import AsyncMock, patch
import uuid

from fastapi import FastAPI, Request
import pytest

from matti.common.controller import BaseController
from matti.common.exception_handlers import register_exception_handlers
from matti.user import User

AppBuilder = Callable[..., FastAPI]


@pytest.fixture
def fake_user() -> User:
    return User(
        id=uuid.uuid4(),
        username="testuser",
        name="Sam",
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


@pytest.fixture(scope="module")
def build_app() -> AppBuilder:
    def _make_app(controllers: list[type[BaseController]], user: User | None = None) -> FastAPI:
        """Builds a FastAPI application with the provided controllers, optionally injecting `user` into request.state."""
        app = FastAPI()
        register_exception_handlers(app)
        for controller in controllers:
            app.include_router(controller().router)

        @app.middleware("http")
        async def _inject_user(request: Request, call_next):
            request.state.user = user
            return await call_next(request)

        return app

    return _make_app


def _patched_service(factory_name: str) -> Generator[AsyncMock, None, None]:
    """
    Patch ServiceFactory.<factory_name> with a real async function that returns an AsyncMock.
    FastAPI still sees a proper coroutine for the dependency and binds the request body correctly.
    Routes capture the factory when the app is built, so request this fixture before calling build_app.
    """
    fake_service = AsyncMock()

    async def _fake_get_service():
        return fake_service

    with patch(f"matti.common.config.ServiceFactory.{factory_name}", new=_fake_get_service):
        yield fake_service


@pytest.fixture
def mock_user_service() -> Generator[AsyncMock, None, None]:
    yield from _patched_service("get_user_service")


@pytest.fixture
def mock_conversation_service() -> Generator[AsyncMock, None, None]:
    yield from _patched_service("get_conversation_service")


@pytest.fixture
def mock_action_service() -> Generator[AsyncMock, None, None]:
    yield from _patched_service("get_action_service")


@pytest.fixture
def mock_goal_service() -> Generator[AsyncMock, None, None]:
    yield from _patched_service("get_goal_service")


@pytest.fixture
def mock_follow_up_service() -> Generator[AsyncMock, None, None]:
    yield from _patched_service("get_follow_up_service")


@pytest.fixture
def mock_feedback_service() -> Generator[AsyncMock, None, None]:
    yield from _patched_service("get_feedback_service")


@pytest.fixture
def mock_assistant_service() -> Generator[AsyncMock, None, None]:
    yield from _patched_service("get_assistant_service")
