from uuid import UUID

from matti.common.entities import utc_now
from matti.common.exceptions import NotFoundException
from matti.common.repositories import BaseRepository
from matti.goals import Goal, GoalStatus, GoalType
from matti.goals.goal_entities import GoalEntity


class GoalRepository(BaseRepository):
    """Repository for goals."""

    def create_goal(self, user_id: UUID, title: str, goal_type: GoalType, description: str | None = None) -> Goal:
        entity = GoalEntity(user_id=user_id, title=title, goal_type=goal_type, description=description, status=GoalStatus.DRAFT)
        self.session.add(entity)
        self.commit()
        self.session.refresh(entity)
        return entity.to_domain()

    def find_by_id(self, goal_id: UUID, user_id: UUID) -> Goal:
        entity = self.session.query(GoalEntity).filter_by(id=goal_id, user_id=user_id).first()
        if not entity:
            raise NotFoundException(f"Goal with ID: {goal_id} was not found!")
        return entity.to_domain()

    def list_by_status(self, user_id: UUID, status: GoalStatus) -> list[Goal]:
        entities = self.session.query(GoalEntity).filter_by(user_id=user_id, status=status).order_by(GoalEntity.created_at.desc()).all()
        return [e.to_domain() for e in entities]

    def update_status(self, goal_id: UUID, status: GoalStatus) -> Goal:
        entity = self.session.query(GoalEntity).filter_by(id=goal_id).first()
        if not entity:
            raise NotFoundException(f"Goal with ID: {goal_id} was not found!")
        entity.status = status
        entity.updated_at = utc_now()
        self.commit()
        return entity.to_domain()
