from datetime import datetime
from typing import Any
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import IntegrityError

from matti.common.entities import utc_now
from matti.common.exceptions import ConflictException, NotFoundException
from matti.common.models import ThemeId
from matti.common.repositories import BaseRepository
from matti.conversation import ChatMessage, Conversation
from matti.conversation.conversation_entities import ConversationEntity


class ConversationRepository(BaseRepository):
    """
    Repository for managing theme-scoped conversations.
    Every write commits immediately; callers compose these calls inside a service.
    """

    def _get_entity(self, conversation_id: UUID, user_id: UUID | None = None) -> ConversationEntity:
        query = self.session.query(ConversationEntity).filter(ConversationEntity.id == conversation_id)
        if user_id is not None:
            query = query.filter(ConversationEntity.user_id == user_id)
        entity = query.first()
        if not entity:
            raise NotFoundException(f"Conversation with ID: {conversation_id} was not found!")
        return entity

    def find_active(self, user_id: UUID, theme_id: ThemeId) -> Conversation | None:
        entity = (
            self.session.query(ConversationEntity)
            .filter_by(user_id=user_id, theme_id=theme_id, is_archived=False)
            .order_by(ConversationEntity.updated_at.desc())
            .first()
        )
        return entity.to_domain() if entity else None

    def create(self, user_id: UUID, theme_id: ThemeId) -> Conversation:
        entity = ConversationEntity(user_id=user_id, theme_id=theme_id, messages=[])
        self.session.add(entity)
        try:
            self.commit()
        except IntegrityError as e:
            self.rollback()
            raise ConflictException(f"User {user_id} already has an active conversation for theme {theme_id.value}") from e
        self.session.refresh(entity)
        logger.info("Conversation created", conversation_id=str(entity.id), theme_id=theme_id.value)
        return entity.to_domain()

    def find_by_id(self, conversation_id: UUID, user_id: UUID | None = None) -> Conversation:
        return self._get_entity(conversation_id, user_id).to_domain()

    def append_message(self, conversation_id: UUID, user_id: UUID, message: ChatMessage, thread_id: str | None = None) -> Conversation:
        entity = self._get_entity(conversation_id, user_id)
        if entity.is_archived:
            raise ConflictException(f"Conversation with ID: {conversation_id} is archived and read-only")

        # JSONB columns only track reassignment, so build a new list.
        entity.messages = [*(entity.messages or []), message.model_dump(mode="json")]
        if thread_id:
            entity.thread_id = thread_id
        entity.updated_at = utc_now()
        self.commit()
        return entity.to_domain()

    def list_recent(self, user_id: UUID, limit: int) -> list[Conversation]:
        entities = (
            self.session.query(ConversationEntity)
            .filter_by(user_id=user_id)
            .order_by(ConversationEntity.updated_at.desc())
            .limit(limit)
            .all()
        )
        return [e.to_domain() for e in entities]

    def find_most_recent(self, user_id: UUID, exclude_id: UUID | None = None) -> Conversation | None:
        query = self.session.query(ConversationEntity).filter(ConversationEntity.user_id == user_id)
        if exclude_id is not None:
            query = query.filter(ConversationEntity.id != exclude_id)
        entity = query.order_by(ConversationEntity.updated_at.desc()).first()
        return entity.to_domain() if entity else None

    def update_fields(self, conversation_id: UUID, user_id: UUID | None = None, **fields: Any) -> Conversation:
        """Set the given columns and bump `updated_at`."""
        entity = self._get_entity(conversation_id, user_id)
        for name, value in fields.items():
            setattr(entity, name, value)
        entity.updated_at = utc_now()
        self.commit()
        return entity.to_domain()

    def increment_count(self, conversation_id: UUID, user_id: UUID | None = None) -> Conversation:
        entity = self._get_entity(conversation_id, user_id)
        entity.conversation_count = ConversationEntity.conversation_count + 1
        entity.updated_at = utc_now()
        self.commit()
        self.session.refresh(entity)
        return entity.to_domain()

    def archive(self, conversation_id: UUID, summary: str | None) -> Conversation:
        entity = self._get_entity(conversation_id)
        now = utc_now()
        entity.is_archived = True
        entity.archived_at = now
        if summary:
            entity.summary = summary
        entity.updated_at = now
        self.commit()
        return entity.to_domain()

    def delete(self, conversation_id: UUID) -> None:
        self.session.query(ConversationEntity).filter_by(id=conversation_id).delete()
        self.commit()

    def delete_by_theme(self, user_id: UUID, theme_id: ThemeId) -> int:
        deleted = self.session.query(ConversationEntity).filter_by(user_id=user_id, theme_id=theme_id).delete()
        self.commit()
        return deleted

    def prune(self, user_id: UUID, keep: int) -> int:
        """Hard-delete everything beyond the `keep` most recently updated conversations of the user."""
        stale_ids = [
            row.id
            for row in self.session.query(ConversationEntity.id)
            .filter_by(user_id=user_id)
            .order_by(ConversationEntity.updated_at.desc())
            .offset(keep)
            .all()
        ]
        if not stale_ids:
            return 0
        self.session.query(ConversationEntity).filter(ConversationEntity.id.in_(stale_ids)).delete(synchronize_session=False)
        self.commit()
        logger.info("Pruned old conversations", user_id=str(user_id), count=len(stale_ids))
        return len(stale_ids)

    def find_idle_active(self, before: datetime) -> list[Conversation]:
        entities = (
            self.session.query(ConversationEntity)
            .filter(ConversationEntity.is_archived.is_(False), ConversationEntity.updated_at < before)
            .order_by(ConversationEntity.updated_at.asc())
            .all()
        )
        return [e.to_domain() for e in entities]
