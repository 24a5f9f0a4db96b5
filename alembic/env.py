from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from gcash_portal.config import settings
from gcash_portal.database import Base
# Import models so they register on Base.metadata
from gcash_portal import models  # noqa: F401
from gcash_portal.models.constant import PUBLIC_SCHEMA

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def include_name(name, type_, parent_names):
    # only the public schema is ours; auth and storage belong to Supabase
    if type_ == "schema":
        return name in (None, PUBLIC_SCHEMA)
    return True


def include_object(object, name, type_, reflected, compare_to):
    # auth.users belongs to Supabase Auth
    if type_ == "table" and object.info.get("external"):
        return False
    return True


def run_migrations_offline() -> None:
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_schemas=True,
        include_name=include_name,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_schemas=True,
            include_name=include_name,
            include_object=include_object,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
