# File: alembic/env.py
import sys
import os
from pathlib import Path
from logging.config import fileConfig
from sqlalchemy import engine_from_config
from sqlalchemy import pool
from alembic import context

# Add the project root to the path
sys.path.append(str(Path(__file__).parent.parent))

# Import the database Base object and the resolved connection settings
from core.database import Base, settings
target_metadata = Base.metadata

# This function dynamically imports all your models
def import_models():
    apps_path = Path(__file__).parent.parent / 'apps'
    for app_name in os.listdir(apps_path):
        app_dir = apps_path / app_name
        if app_dir.is_dir() and not app_name.startswith('_'):
            models_path = app_dir / 'models.py'
            if models_path.is_file():
                __import__(f'apps.{app_name}.models')

import_models()

# This is the Alembic Config object, which provides access to the values within the .ini file
config = context.config
# ConfigParser interpolates '%', which can appear in URL-encoded passwords
config.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))

# Keep the application's loggers alive when Alembic runs inside the server process
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def run_migrations_online():
    """
    Run migrations in 'online' mode.
    In this scenario we need to create an Engine
    and associate a connection with the context.
    """
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
        )
        with context.begin_transaction():
            context.run_migrations()

run_migrations_online()
