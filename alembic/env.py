import os
import sys
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

# Add the project root to the Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import get_defaults
from core.logging import ComponentType, get_logger
from core.schema import SchemaProviderBridge

# this is the Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

defaults = get_defaults()

# DATABASE_URL wins over the ini file
if os.getenv("DATABASE_URL"):
    config.set_main_option("sqlalchemy.url", defaults.translation.database_url)

entity_dirs = list(defaults.discovery.entity_dirs) or [
    d for d in config.get_main_option("entity_dirs", "").split() if d
]
connection_name = config.get_main_option("connection_name", defaults.translation.connection_name)

logger = get_logger("alembic.env", ComponentType.MIGRATIONS)


def get_target_metadata(connection):
    logger.info(f"Building target metadata for connection {connection_name} from {entity_dirs}")
    provider = SchemaProviderBridge(entity_dirs, connection_name, connection)
    return provider.create_schema()


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=get_target_metadata(url),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=get_target_metadata(connection),
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
