from fastapi import APIRouter, Depends

from matti.common.config import ServiceFactory
from matti.common.controller import BaseController
from matti.user.user_models import UserCreateRequest, UserResponse
from matti.user.user_services import UserService


class UserController(BaseController):
    prefix = "users"

    @property
    def router(self) -> APIRouter:
        @self.api_router.post("")
        async def create_user(request: UserCreateRequest, user_service: UserService = Depends(ServiceFactory.get_user_service)) -> UserResponse:
            user = await user_service.add_user(request)
            return UserResponse(**user.model_dump())

        return self.api_router
