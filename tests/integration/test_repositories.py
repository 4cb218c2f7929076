from datetime import timedelta
import uuid

import pytest
from sqlalchemy.orm import Session

from matti.action import Action, ActionStatus, FollowUpStatus
from matti.action.action_entities import ActionEntity, FollowUpEntity
from matti.action.action_repositories import ActionRepository
from matti.common.entities import utc_now
from matti.common.exceptions import ConflictException
from matti.common.models import Role, ThemeId
from matti.conversation import ChatMessage
from matti.conversation.conversation_repositories import ConversationRepository
from matti.user import User


def _statuses(session: Session, action_id: uuid.UUID) -> list[FollowUpStatus]:
    rows = session.query(FollowUpEntity).filter_by(action_id=action_id).order_by(FollowUpEntity.scheduled_for).all()
    return [row.status for row in rows]


def _create_action(repository: ActionRepository, user: User, *offsets: timedelta) -> Action:
    now = utc_now()
    action, _ = repository.create_action(
        Action(id=uuid.uuid4(), user_id=user.id, theme_id=ThemeId.SCHOOL, action_text="Huiswerk plannen"),
        [now + offset for offset in offsets],
    )
    return action


def test_prune_keeps_the_most_recent_conversations_of_the_owner(session: Session, db_user: User, other_user: User):
    repository = ConversationRepository(session)
    created = []
    for _ in range(12):
        conversation = repository.create(db_user.id, ThemeId.SCHOOL)
        repository.archive(conversation.id, summary=None)
        created.append(conversation.id)
    untouched = repository.create(other_user.id, ThemeId.SCHOOL)

    pruned = repository.prune(db_user.id, keep=10)

    assert pruned == 2
    remaining = {c.id for c in repository.list_recent(db_user.id, limit=50)}
    assert remaining == set(created[2:])
    assert repository.find_by_id(untouched.id).user_id == other_user.id


def test_second_active_conversation_for_a_theme_is_a_conflict(session: Session, db_user: User):
    repository = ConversationRepository(session)
    first = repository.create(db_user.id, ThemeId.BULLYING)

    with pytest.raises(ConflictException):
        repository.create(db_user.id, ThemeId.BULLYING)

    assert repository.find_active(db_user.id, ThemeId.BULLYING).id == first.id
    repository.archive(first.id, summary="Eerste gesprek")
    assert repository.create(db_user.id, ThemeId.BULLYING).id != first.id


def test_leaving_pending_skips_outstanding_follow_ups(session: Session, db_user: User):
    repository = ActionRepository(session)
    action = _create_action(repository, db_user, timedelta(days=2), timedelta(days=4))

    updated = repository.update_status(action.id, db_user.id, ActionStatus.COMPLETED)

    assert updated.status is ActionStatus.COMPLETED
    assert updated.completed_at is not None
    assert not updated.is_active_step
    assert _statuses(session, action.id) == [FollowUpStatus.SKIPPED, FollowUpStatus.SKIPPED]


def test_due_follow_ups_only_include_pending_actions(session: Session, db_user: User):
    repository = ActionRepository(session)
    open_action = _create_action(repository, db_user, -timedelta(hours=1), timedelta(days=2))
    closed_action = _create_action(repository, db_user, -timedelta(hours=1))
    session.query(ActionEntity).filter_by(id=closed_action.id).update({ActionEntity.status: ActionStatus.CANCELLED})
    session.commit()

    due = repository.find_due_follow_ups(utc_now())

    assert [action.id for _, action in due] == [open_action.id]
    assert due[0][0].scheduled_for < utc_now()


def test_settled_follow_ups_are_published_with_the_check_in_message(session: Session, db_user: User):
    actions = ActionRepository(session)
    conversations = ConversationRepository(session)
    conversation = conversations.create(db_user.id, ThemeId.SCHOOL)
    action = _create_action(actions, db_user, -timedelta(days=2), -timedelta(hours=1))
    older, latest = (f for f, _ in actions.find_due_follow_ups(utc_now()))

    actions.settle_follow_ups(latest.id, [older.id], utc_now())
    conversations.append_message(conversation.id, db_user.id, ChatMessage(role=Role.SYSTEM, content="Hoe ging het?"))
    session.expire_all()

    assert _statuses(session, action.id) == [FollowUpStatus.SKIPPED, FollowUpStatus.SENT]
    assert [m.content for m in conversations.find_by_id(conversation.id).messages] == ["Hoe ging het?"]


def test_settled_follow_ups_roll_back_without_a_commit(session: Session, db_user: User):
    actions = ActionRepository(session)
    action = _create_action(actions, db_user, -timedelta(hours=1))
    (follow_up, _), = actions.find_due_follow_ups(utc_now())

    actions.settle_follow_ups(follow_up.id, [], utc_now())
    actions.rollback()

    assert _statuses(session, action.id) == [FollowUpStatus.PENDING]
