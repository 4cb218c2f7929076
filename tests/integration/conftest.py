from typing import Generator
import os

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from matti.common.entities import BaseEntity
from matti.user import User
from matti.user.user_repository import UserRepository

# Register every entity on the metadata.
from matti.user import user_entities  # noqa: F401
from matti.conversation import conversation_entities  # noqa: F401
from matti.goals import goal_entities  # noqa: F401
from matti.action import action_entities  # noqa: F401
from matti.feedback import feedback_entities  # noqa: F401


@pytest.fixture(scope="module")
def engine() -> Generator[Engine, None, None]:
    """
    A throwaway schema on the PostgreSQL database named by TEST_DATABASE_URL.
    The repositories rely on JSONB and partial unique indexes, so there is no in-process substitute.
    """
    url = os.getenv("TEST_DATABASE_URL")
    if not url:
        pytest.skip("TEST_DATABASE_URL is not set")
    engine = create_engine(url, future=True)
    BaseEntity.metadata.drop_all(engine)
    BaseEntity.metadata.create_all(engine)
    yield engine
    BaseEntity.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)()
    yield session
    session.rollback()
    for table in reversed(BaseEntity.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def db_user(session: Session) -> User:
    return UserRepository(session).create_user("sam", name="Sam")


@pytest.fixture
def other_user(session: Session) -> User:
    return UserRepository(session).create_user("noor", name="Noor")
