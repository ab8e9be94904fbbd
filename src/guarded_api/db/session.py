"""
guarded_api.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine from settings (file/server databases and in-memory SQLite).
- Create the async sessionmaker used for per-request sessions.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from guarded_api.settings import Settings


def _engine_options(database_url: str) -> dict[str, Any]:
    if database_url.endswith(":memory:"):
        # One shared connection, or every session would see its own empty database.
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def create_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.database_url, **_engine_options(settings.database_url))


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows stay readable after commit; services build DTOs from them post-commit.
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
