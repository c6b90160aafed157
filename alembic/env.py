from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from account_service.core.config import get_settings
from account_service.db.base import Base
from account_service.db.models.user_model import User

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# autogenerate compares against every model registered on Base
target_metadata = Base.metadata


def get_url() -> str:
    # migrations use the sync driver
    return get_settings().database_url.replace("+asyncpg", "")


def run_migrations_offline():
    """Emit SQL for the users schema without a live database."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Apply migrations over a NullPool connection."""
    engine = create_engine(get_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
