from datetime import datetime
import uuid

from sqlalchemy import DateTime
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from matti.common.entities import BaseEntity, utc_now


class UserEntity(BaseEntity):
    """
    Represents a user in the system.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, doc="Unique Identifier of the User")
    username: Mapped[str] = mapped_column(nullable=False, unique=True, doc="Username of the User, as forwarded by the auth proxy")
    name: Mapped[str | None] = mapped_column(nullable=True, doc="Display name used in greetings")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now, doc="Timestamp when the User was created")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        doc="Timestamp when the User was last updated",
    )
