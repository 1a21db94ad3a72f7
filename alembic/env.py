# ==============================================================================
# ALEMBIC ENVIRONMENT - Migration Configuration
# ==============================================================================
# Migrations for the PostgreSQL deployment; SQLite creates its tables on
# connect and does not need them
# ==============================================================================

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from storefront.core.settings import DatabaseType, settings

# Importing the package registers every model with the metadata
from storefront.domain_models import SQLBase

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLBase.metadata


def get_url(sync: bool = False) -> str:
    """Database URL for migrations; ``sync`` drops the async driver."""
    if settings.DATABASE_TYPE == DatabaseType.POSTGRESQL:
        return settings.postgres_sync_url if sync else settings.postgres_url
    if settings.DATABASE_TYPE == DatabaseType.SQLITE:
        return settings.SQLITE_URL if sync else settings.sqlite_async_url
    raise ValueError(f"Unsupported database type: {settings.DATABASE_TYPE}")


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Generates SQL script without connecting to database.
    """
    context.configure(
        url=get_url(sync=True),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
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
