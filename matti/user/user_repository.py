from uuid import UUID

from matti.common.exceptions import ConflictException, NotFoundException
from matti.common.repositories import BaseRepository
from matti.user import User
from matti.user.user_entities import UserEntity


class UserRepository(BaseRepository):
    """Repository for user-related database operations."""

    def get_user_by_id(self, user_id: UUID) -> User:
        """Retrieve a user by their ID."""
        user = self.session.query(UserEntity).filter(UserEntity.id == user_id).first()
        if not user:
            raise NotFoundException(f"User with ID {user_id} not found.")
        return User.from_entity(user)

    def find_user_by_username(self, username: str) -> User | None:
        """Retrieve a user by their username, or None when unknown."""
        user = self.session.query(UserEntity).filter(UserEntity.username == username).first()
        return User.from_entity(user) if user else None

    def create_user(self, username: str, name: str | None = None) -> User:
        """Create a new user."""
        if self.session.query(UserEntity).filter(UserEntity.username == username).first():
            raise ConflictException(f"User with username {username} already exists.")

        new_user = UserEntity(username=username, name=name)
        self.session.add(new_user)
        self.commit()
        self.session.refresh(new_user)
        return User.from_entity(new_user)
