"""Alembic environment for the Meeple records table.

The database URL comes from ``DATABASE_URL`` (via ``.env``), resolved by the
same :func:`create_db_engine` the API uses, so migrations and the running
service always agree on the target database.
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from alembic import context

load_dotenv()

from meeple.database.engine import create_db_engine  # noqa: E402
from meeple.database.models import Base  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL for the configured URL without connecting."""
    engine = create_db_engine()
    context.configure(
        url=engine.url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_db_engine()
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
