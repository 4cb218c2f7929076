from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar

from fastapi import APIRouter, Request

from matti.common.exceptions import UnauthorizedException
from matti.user import User


class BaseController(ABC):
    """
    Base controller class for the application.
    Every feature module exposes its routes through a subclass mounted under `/api/v1/{prefix}`.
    """

    prefix: ClassVar[str]
    tags: ClassVar[list[str | Enum] | None] = None

    def __init__(self) -> None:
        self.api_router = APIRouter(prefix=f"/api/v1/{self.prefix}" if self.prefix else "", tags=self.tags if self.tags else [self.prefix], redirect_slashes=False)

    @property
    @abstractmethod
    def router(self) -> APIRouter:
        """Abstract property must be implemented by subclasses to return the APIRouter instance."""
        raise NotImplementedError("Subclasses must implement the router property.")


def current_user(request: Request) -> User:
    """Returns the user resolved by the middleware, failing when the request is anonymous."""
    user: User | None = getattr(request.state, "user", None)
    if user is None:
        raise UnauthorizedException("Missing or unknown x-forwarded-user header")
    return user
