"""
Alembic Migration Environment
===============================

What:  Runs the `quotes` migrations with the application's async engine.
Why:   The schema must match quotebook.models.quote on PostgreSQL in
       production and on SQLite in development.
How:   The URL comes from quotebook.config (DATABASE_URL), never alembic.ini;
       migrations run through connection.run_sync() on an async engine.
Who:   `alembic upgrade head` / `alembic revision --autogenerate`, run from backend/.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from quotebook.config import settings
from quotebook.database import Base

# Registers the quotes table on Base.metadata for --autogenerate
from quotebook.models.quote import Quote  # noqa: F401

config = context.config

# Logging sections live in alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# ── Database URL ──────────────────────────────────────────────────────────
# The app and its migrations must hit the same database, so DATABASE_URL
# overrides whatever alembic.ini says.
config.set_main_option("sqlalchemy.url", settings.database_url)


def run_migrations_offline() -> None:
    """
    Emit the migration SQL to stdout without connecting.

    When:  Reviewing the DDL a deploy will apply, e.g. before handing it to
           a DBA for the production PostgreSQL.
    """
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    """Apply pending migrations on an open (sync-facing) connection."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        # SQLite cannot ALTER most constraints in place; batch mode copies the table
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Connect with an async engine and apply pending migrations.

    The engine is built from the [alembic] section with NullPool: a migration
    run opens one connection and exits, so there is nothing to pool.
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
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
