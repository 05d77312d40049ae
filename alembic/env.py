"""Alembic environment shared by every service.

All services live in one schema, so a single migration history covers them.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from libs.common.config import get_settings
from libs.db.base import Base

# Registers every table on Base.metadata
from services.clubs_service import models as club_models  # noqa: F401
from services.messaging_service import models as messaging_models  # noqa: F401
from services.volunteer_service import models as volunteer_models  # noqa: F401
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

settings = get_settings()
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# alembic.ini leaves the URL empty; the environment decides
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.replace("%", "%%"))


def _context_options() -> dict:
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        # SQLite cannot ALTER most constraints in place
        "render_as_batch": settings.is_sqlite,
    }


def run_migrations_offline() -> None:
    """Emit migration SQL to stdout without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_context_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    context.configure(connection=connection, **_context_options())
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
