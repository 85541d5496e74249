"""Alembic environment for the storefront tables."""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlmodel import SQLModel

import app.models  # noqa: F401  registers every table on SQLModel.metadata
from app.config import settings

config = context.config
target_metadata = SQLModel.metadata

# set by callers that already hold a connection, e.g. the test suite
external_connection = config.attributes.get("connection")

if config.config_file_name is not None and external_connection is None:
    fileConfig(config.config_file_name)


def configure(**kwargs):
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        # ALTERs on sqlite need the copy-and-move batch mode
        render_as_batch=True,
        **kwargs,
    )


def run_migrations_offline():
    configure(url=settings.sqlalchemy_url, literal_binds=True)

    with context.begin_transaction():
        context.run_migrations()


def run_on(connection):
    configure(connection=connection)

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    if external_connection is not None:
        run_on(external_connection)
        return

    # the URL is passed directly; a quoted password would break ini interpolation
    engine = create_engine(settings.sqlalchemy_url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        run_on(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
