"""create matti tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:12:31.402117

"""

import os
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    sql_path = os.path.join(
        os.path.dirname(__file__),  # current directory of this file
        os.pardir,
        "raw_sql",
        "001_create_matti_tables.sql",
    )
    with open(sql_path, "r") as file:
        op.execute(file.read())


def downgrade() -> None:
    """Downgrade schema."""
    for table in ("message_feedback", "follow_ups", "actions", "goals", "conversations", "users"):
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE;")
    for enum_type in ("rating", "goal_status", "goal_type", "follow_up_status", "action_status", "outcome", "bullying_severity", "theme"):
        op.execute(f"DROP TYPE IF EXISTS {enum_type};")
