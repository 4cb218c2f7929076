from uuid import UUID

from matti.user import User
from matti.user.user_models import UserCreateRequest
from matti.user.user_repository import UserRepository


class UserService:
    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    async def get_user(self, user_id: UUID) -> User:
        return self.user_repository.get_user_by_id(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return self.user_repository.find_user_by_username(username)

    async def add_user(self, user_request: UserCreateRequest) -> User:
        return self.user_repository.create_user(username=user_request.username, name=user_request.name)
