from logging.config import fileConfig
from sqlalchemy import create_engine, pool
from alembic import context

from freshtrack.config import get_settings
from freshtrack.database import Base, database_url, is_cloud_url
import freshtrack.models  # noqa: F401  registers every table on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

_db_url = database_url(get_settings().DATABASE_URL)

# psycopg v3 takes SSL settings from the URL here, not an ssl context
if is_cloud_url(_db_url) and "sslmode" not in _db_url:
    _db_url += ("&" if "?" in _db_url else "?") + "sslmode=require"

# SQLite cannot ALTER most constraints in place
_render_as_batch = _db_url.startswith("sqlite")

config.set_main_option("sqlalchemy.url", _db_url)

target_metadata = Base.metadata


def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=_render_as_batch,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = create_engine(_db_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=_render_as_batch,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
