"""
guarded_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Hand out the settings instance the app was built with.
- Open one `AsyncSession` per request and discard uncommitted work on failure.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from guarded_api.settings import Settings, get_settings


def settings_dep(request: Request) -> Settings:
    # Apps built in tests carry their own Settings; otherwise read the environment.
    return getattr(request.app.state, "settings", None) or get_settings()


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Services commit explicitly; a guard failure after a flush must not leak writes.
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
