from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from inventory_api.config import Settings, settings

# Naming conventions for database constraints.
# Without these, Alembic can't autogenerate consistent constraint names across migrations.
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",  # Index
    "uq": "uq_%(table_name)s_%(column_0_name)s",  # Unique constraint
    "ck": "ck_%(table_name)s_%(constraint_name)s",  # Check constraint
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",  # Foreign key
    "pk": "pk_%(table_name)s",  # Primary key
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    SQLAlchemy uses Base.metadata to track all registered models and their
    table schemas. The naming_convention ensures all constraints have
    predictable names, which Alembic migrations rely on.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def engine_options(config: Settings) -> dict[str, Any]:
    """Engine keyword arguments for the configured backend.

    SQLite (local runs, tests) uses SQLAlchemy's default pool and takes no
    pool sizing or asyncpg connect args.
    """
    if make_url(config.database_url).get_backend_name() == "sqlite":
        return {"echo": config.db_echo}
    return {
        "pool_size": config.db_pool_size,  # Persistent connections
        "max_overflow": config.db_max_overflow,  # Extra connections under load
        "pool_timeout": config.db_pool_timeout,  # Wait time for available connection
        "pool_recycle": config.db_pool_recycle,  # Max connection age
        "pool_pre_ping": config.db_pool_pre_ping,  # Test connection before checkout
        "echo": config.db_echo,  # SQL logging
        # asyncpg driver options, passed directly to asyncpg.connect()
        "connect_args": {"command_timeout": config.db_statement_timeout},
    }


engine = create_async_engine(settings.database_url, **engine_options(settings))

# expire_on_commit=False keeps objects usable after commit without re-querying,
# accessing expired attributes in async code would trigger sync I/O.
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a database session per request.

    Commits on success, rolls back on exception. This is the single place where
    transaction boundaries are managed; services and repositories only flush.
    Exceptions are re-raised untouched so the handler chain can translate them.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def shutdown() -> None:
    """Close all pooled database connections on application shutdown."""
    await engine.dispose()
