"""Alembic environment script for async database migrations.

The database URL comes from the application settings rather than
``alembic.ini``. Every applied upgrade step is also recorded in the
``schema_migrations`` table, which the health diagnostics read to report the
last migration time.
"""

import asyncio
import logging
from typing import Any

from alembic import context
from alembic.migration import MigrationContext, MigrationInfo
from sqlalchemy import insert, pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from worktrack.core.config import get_settings
from worktrack.domain.entities import utc_now
from worktrack.infrastructure.database.base import Base
from worktrack.infrastructure.database.models import schema_migrations_table

config = context.config

logger = logging.getLogger(__name__)

target_metadata = Base.metadata


def record_applied_revision(
    ctx: MigrationContext,
    step: MigrationInfo,
    heads: set[Any],  # noqa: ARG001
    run_args: dict[str, Any],  # noqa: ARG001
) -> None:
    """Insert a ``schema_migrations`` row for each upgrade step."""
    if not step.is_upgrade or ctx.connection is None:
        return
    revision = step.up_revision_id
    ctx.connection.execute(
        insert(schema_migrations_table).values(revision=revision, applied_at=utc_now())
    )
    logger.info("Recorded applied revision %s", revision)


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    logger.info("Running migrations in offline mode")

    context.configure(
        url=get_settings().database_config.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """Run migrations on ``connection``, recording every upgrade step."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
        on_version_apply=record_applied_revision,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run migrations in 'online' mode with an async engine."""
    logger.info("Running migrations in online mode with async engine")

    db_config = get_settings().database_config
    configuration: dict[str, Any] = {
        "sqlalchemy.url": db_config.database_url,
        "sqlalchemy.echo": db_config.echo,
    }

    # Migrations do not need pooling
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
