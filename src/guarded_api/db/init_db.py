"""
guarded_api.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Enroll a first administrator so a fresh database has a principal that resolves.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from guarded_api.db import models  # noqa: F401  # register models on Base.metadata
from guarded_api.db.base import Base
from guarded_api.db.models import Administrator
from guarded_api.observability.logging import get_logger

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def bootstrap_admin(
    session_factory: async_sessionmaker[AsyncSession], *, email: str, name: str
) -> str:
    """
    Idempotent: returns the existing active administrator with this email, if any.
    """

    email = email.strip().lower()
    async with session_factory() as session:
        stmt = select(Administrator).where(
            Administrator.email == email, Administrator.deleted_at.is_(None)
        )
        admin = (await session.execute(stmt)).scalars().first()
        if admin is None:
            admin = Administrator(email=email, name=name)
            session.add(admin)
            await session.commit()
            log.info("bootstrap_admin_created", admin_id=admin.id)
        return admin.id


# --- Module Notes -----------------------------------------------------------
# Production schemas come from Alembic migrations (see `alembic/env.py`).
