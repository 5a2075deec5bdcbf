"""Alembic environment for the signlearn schema.

The URL comes from DATABASE_URL (via signlearn.core.config) when set,
otherwise from alembic.ini.  Migrations always run on the sync psycopg2
driver even though the app itself talks to PostgreSQL through asyncpg.
"""

from __future__ import annotations

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url

import signlearn.db.tables  # noqa: F401  registers the row classes
from alembic import context
from signlearn.core.config import SETTINGS
from signlearn.db.engine import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _sync_url(url: str) -> str:
    parsed = make_url(url)
    if parsed.drivername != "postgresql+asyncpg":
        return url
    return parsed.set(drivername="postgresql+psycopg2").render_as_string(
        hide_password=False
    )


if SETTINGS.database_url:
    config.set_main_option("sqlalchemy.url", _sync_url(SETTINGS.database_url))

target_metadata = Base.metadata


def _configure(**kwargs: object) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )


def run_migrations_online() -> None:
    engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        _configure(connection=connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
