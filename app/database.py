"""Async database connection и session management"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from settings.config import AppConfig


def normalize_db_url(db_url: str) -> str:
    """postgresql:// -> postgresql+asyncpg://, остальные драйверы как есть"""
    if db_url.startswith('postgresql://'):
        return db_url.replace('postgresql://', 'postgresql+asyncpg://', 1)
    return db_url


def create_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(
        normalize_db_url(db_url),
        echo=echo,
        poolclass=NullPool,
    )


def create_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Create async engine
engine = create_engine(AppConfig.DB_URL, echo=AppConfig.DEBUG)

# Create async session factory
async_session_maker = create_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency для получения DB сессии"""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()
