"""Alembic environment — runs metals/metal_rates migrations on the async engine.

Design Decisions:
    - URL taken from metal_api Settings (DATABASE_URL / .env), so the
      postgresql:// -> postgresql+asyncpg:// rewrite lives in one place
    - alembic.ini's sqlalchemy.url is used only with `alembic -x url=ini ...`
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from metal_api.config import get_settings
from metal_api.db.base import Base
import metal_api.models  # noqa: F401  registers Metal and MetalRate on Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _database_url() -> str:
    if context.get_x_argument(as_dictionary=True).get("url") == "ini":
        return config.get_main_option("sqlalchemy.url")
    return get_settings().database_url


def _configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


async def _run_online() -> None:
    engine = create_async_engine(_database_url(), poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(lambda conn: _configure(connection=conn))
    await engine.dispose()


if context.is_offline_mode():
    _configure(
        url=_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_run_online())
