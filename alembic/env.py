import asyncio
from logging import getLogger
from logging.config import fileConfig
from typing import Sequence, Union

from alembic import context
from alembic.operations import ops
from alembic.autogenerate import rewriter
from alembic.script import ScriptDirectory
from sqlalchemy import pool, MetaData
from sqlalchemy.ext.asyncio import async_engine_from_config

logger = getLogger(__name__)
config = context.config

writer_rename_migration = rewriter.Rewriter()


@writer_rename_migration.rewrites(ops.MigrationScript)
def rename_migration_script(migration_context, revision, migration_script):
    # extract current head revision
    head_revision = ScriptDirectory.from_config(migration_context.config).get_current_head()
    if head_revision is None:
        # edge case with first migration
        new_rev_id = 1
    else:
        # default branch with incrementation
        last_rev_id = int(head_revision.lstrip('0'))
        new_rev_id = last_rev_id + 1
    # fill zeros up to 4 digits: 1 -> 0001
    migration_script.rev_id = '{0:04}'.format(new_rev_id)
    return migration_script


def run_migrations_offline(target_metadata):
    """Run migrations in 'offline' mode.

    Configures the context with just a URL, calls to context.execute()
    emit the given string to the script output.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        process_revision_directives=writer_rename_migration,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith('sqlite'),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection, target_metadata):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        process_revision_directives=writer_rename_migration,
        render_as_batch=connection.dialect.name == 'sqlite',
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online(target_metadata):
    """Run migrations in 'online' mode through the async engine"""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations, target_metadata)

    await connectable.dispose()


def run_alembic(sqlalchemy_url: str, target_metadata: Union[MetaData, Sequence[MetaData]]):
    # Interpret the config file for Python logging.
    if config.config_file_name is not None:
        fileConfig(config.config_file_name, disable_existing_loggers=False)

    config.set_main_option('sqlalchemy.url', sqlalchemy_url)

    if context.is_offline_mode():
        run_migrations_offline(target_metadata)
    else:
        asyncio.run(run_migrations_online(target_metadata))


from app.database import normalize_db_url  # noqa: E402
from app.models import base  # noqa: E402
from settings.config import AppConfig  # noqa: E402

run_alembic(sqlalchemy_url=normalize_db_url(AppConfig.DB_URL), target_metadata=base.meta)
