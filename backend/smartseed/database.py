"""Database engine, session factory, and declarative base.

A single schema holds every table. Handlers never touch the engine
directly: they receive an ``AsyncSession`` through ``Depends(get_db)``,
which wraps the whole request in one transaction (commit on success,
rollback on any exception).
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import DeclarativeBase

from smartseed.config import settings

is_sqlite = settings.database_url.startswith("sqlite")

engine_kwargs = {"echo": settings.debug}

# SQLite doesn't support pool_size
if not is_sqlite:
    engine_kwargs["pool_size"] = settings.db_pool_size
    engine_kwargs["max_overflow"] = settings.db_max_overflow

engine = create_async_engine(settings.database_url, **engine_kwargs)

async_session = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncSession:
    """Yield a session; the request's writes commit or roll back together."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
