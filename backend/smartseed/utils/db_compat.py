"""Dialect helpers so upserts run on PostgreSQL and on SQLite (tests)."""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def dialect_insert(db: AsyncSession, model):
    """Return an ``insert()`` supporting ``on_conflict_do_update/nothing``."""
    if db.bind.dialect.name == "sqlite":
        return sqlite.insert(model)
    return postgresql.insert(model)
