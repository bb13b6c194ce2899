"""
Alembic Environment
Runs migrations against DATABASE_URL with the synchronous driver
"""

from logging.config import fileConfig

from alembic import context

from fdp_portal.database import DATABASE_URL, create_sync_engine, sync_url
from fdp_portal.models import *  # noqa: F401,F403 - register every table
from fdp_portal.database import metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = metadata


def run_migrations_offline():
    context.configure(
        url=sync_url(DATABASE_URL),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    engine = create_sync_engine()
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
