from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from alembic import context

from matti.common.db_connect import make_base_url, make_connect_args
from matti.common.entities import BaseEntity

# Register every entity on the metadata.
from matti.user import user_entities  # noqa: F401
from matti.conversation import conversation_entities  # noqa: F401
from matti.goals import goal_entities  # noqa: F401
from matti.action import action_entities  # noqa: F401
from matti.feedback import feedback_entities  # noqa: F401

# —— Config and Logging ————————————————————————————————————————————————
config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# MetaData for autogenerate
target_metadata = BaseEntity.metadata


def run_migrations_offline():
    url = make_base_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    # Build engine with dynamic credentials
    engine = create_engine(
        make_base_url(),
        connect_args=make_connect_args(),
        poolclass=pool.NullPool,
    )

    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
