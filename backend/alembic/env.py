"""Alembic environment — async migration runner for both ledger tiers.

Each tier is its own database with its own metadata. The tier is chosen with
`-x tier=hot|cold` (default hot) and selects both the metadata and the URL:

    alembic -x tier=hot upgrade hot@head
    alembic -x tier=cold upgrade cold@head

Design Decisions:
    - Reads HOT_DATABASE_URL / COLD_DATABASE_URL from env (same names as config.py)
    - Converts postgresql:// → postgresql+asyncpg:// (same as config.py)
    - Falls back to alembic.ini value for local docker-compose
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from ledgerfed.db.base import ColdBase, HotBase
# Import all models so both metadata objects are populated
import ledgerfed.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

TIER = context.get_x_argument(as_dictionary=True).get("tier", "hot")
if TIER not in ("hot", "cold"):
    raise ValueError(f"Unknown tier '{TIER}' (expected hot or cold)")

target_metadata = HotBase.metadata if TIER == "hot" else ColdBase.metadata


def _get_database_url() -> str:
    """Get the tier's DB URL from env or alembic.ini."""
    url = os.environ.get(f"{TIER.upper()}_DATABASE_URL", "")
    if url:
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url
    return config.get_main_option(f"{TIER}.sqlalchemy.url")


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = _get_database_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run migrations in 'online' mode with async engine."""
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
