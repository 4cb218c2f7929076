from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseEntity(DeclarativeBase):
    """
    Base model for all entities in the application.
    This class can be extended by other models to inherit common properties.
    """

    __abstract__ = True


def enum_values(enum_cls) -> list[str]:
    """Persist enums by value rather than by member name."""
    return [member.value for member in enum_cls]
