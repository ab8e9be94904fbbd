"""
guarded_api.db.base

SQLAlchemy declarative base and shared column mixins.

Responsibilities:
- Provide a shared DeclarativeBase for all ORM models.
- Provide the timestamp/soft-delete columns every guarded table carries.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    # Persist naive UTC timestamps; rendering adds the UTC offset back.
    return datetime.now(tz=UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class SoftDeleteMixin:
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)
    # Non-null means retired; invisible to non-administrative reads.
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True, default=None, index=True)


# --- Module Notes -----------------------------------------------------------
# All ORM models should inherit from `Base` so Alembic and metadata discovery work.
