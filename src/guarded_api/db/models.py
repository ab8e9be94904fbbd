"""
guarded_api.db.models

Persistence schema for the guarded task-management domain.

Responsibilities:
- Define one account table per role (administrators, staff, members).
- Define tenancy (organizations + staff assignments).
- Define guarded resources: boards, board memberships, tasks, notifications.
- Define the append-only audit trail.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Enum, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from guarded_api.db.base import Base, SoftDeleteMixin, new_id, utcnow


class TaskStatus(enum.StrEnum):
    # Enum values are stored in DB; treat as stable API contract.
    todo = "TODO"
    in_progress = "IN_PROGRESS"
    review = "REVIEW"
    done = "DONE"


class TaskPriority(enum.StrEnum):
    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"
    urgent = "URGENT"


class Organization(SoftDeleteMixin, Base):
    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)


class Administrator(SoftDeleteMixin, Base):
    __tablename__ = "administrators"

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)


class StaffAccount(SoftDeleteMixin, Base):
    __tablename__ = "staff_accounts"

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)


class Member(SoftDeleteMixin, Base):
    __tablename__ = "members"

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)

    # One active account per email; retired rows keep theirs.
    __table_args__ = (
        Index(
            "uq_members_active_email",
            "email",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )


class OrgAssignment(SoftDeleteMixin, Base):
    """
    Links a staff account to the organization it currently works in.
    At most one active assignment per staff account is expected.
    """

    __tablename__ = "org_assignments"

    staff_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("staff_accounts.id"), nullable=False, index=True
    )
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=False, index=True
    )


class Board(SoftDeleteMixin, Base):
    __tablename__ = "boards"

    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=False, index=True
    )
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class BoardMembership(SoftDeleteMixin, Base):
    __tablename__ = "board_memberships"

    board_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("boards.id"), nullable=False, index=True
    )
    member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id"), nullable=False, index=True
    )

    # (board_id, member_id) is unique among non-deleted rows only.
    __table_args__ = (
        Index(
            "uq_board_memberships_active",
            "board_id",
            "member_id",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )


class Task(SoftDeleteMixin, Base):
    __tablename__ = "tasks"

    board_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("boards.id"), nullable=False, index=True
    )
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=False, index=True
    )
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(Enum(TaskStatus), nullable=False, index=True)
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority), nullable=False, default=TaskPriority.medium
    )
    due_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (Index("ix_tasks_org_created", "organization_id", "created_at"),)


class Notification(SoftDeleteMixin, Base):
    __tablename__ = "notifications"

    recipient_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    read_at: Mapped[datetime | None] = mapped_column(nullable=True)


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    actor_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    actor_role: Mapped[str] = mapped_column(String(32), nullable=False)
    operation: Mapped[str] = mapped_column(String(32), nullable=False)
    target_type: Mapped[str] = mapped_column(String(64), nullable=False)
    target_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)

    __table_args__ = (Index("ix_audit_target_created", "target_type", "target_id", "created_at"),)


# --- Module Notes -----------------------------------------------------------
# Account tables are mapped to role tags in `guarded_api.auth.roles`; adding a role
# means adding a table here and one registry entry there.
