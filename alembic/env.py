"""
Alembic Migration Environment
===============================

What:  Runs the restaurants schema migrations against DATABASE_URL.
How:   Reads the URL from restaurants_api.config (not alembic.ini), builds an
       async engine for it and runs the migrations through
       connection.run_sync().
When:  `alembic upgrade head` before starting the service with
       DB_CREATE_SCHEMA=false. With the default (true) the service creates
       the `restaurants` table itself on connect.

Backends:
    PostgreSQL (asyncpg): `address`/`grades` are JSONB; types are compared
                          so a JSON → JSONB change shows up in autogenerate.
    SQLite (aiosqlite):   no ALTER COLUMN, so migrations run in batch mode
                          (copy-and-move table).
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from restaurants_api.config import settings
from restaurants_api.database import Base

# Registers the restaurants table on Base.metadata
from restaurants_api.models.restaurant import Restaurant  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

config.set_main_option("sqlalchemy.url", settings.database_url)


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def run_migrations_offline() -> None:
    """Emit the restaurants migration SQL without connecting to the store."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=_is_sqlite(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # one-shot run, no pool to keep
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
