"""
guarded_api.schemas

Request and response DTOs shared by services and routers.

Responsibilities:
- Render timestamps as ISO-8601 strings and absent values as explicit nulls.
- Describe list request bodies (filters, sort, pagination) per resource.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from guarded_api.db.models import (
    AuditEvent,
    Board,
    BoardMembership,
    Member,
    Notification,
    Task,
    TaskPriority,
    TaskStatus,
)
from guarded_api.query.pagination import PageInfo

T = TypeVar("T")


def iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        # Stored timestamps are naive UTC.
        value = value.replace(tzinfo=UTC)
    return value.isoformat()


# --- Pagination --------------------------------------------------------------


class Pagination(BaseModel):
    current: int
    limit: int
    records: int
    pages: int

    @classmethod
    def from_info(cls, info: PageInfo) -> Pagination:
        return cls(current=info.current, limit=info.limit, records=info.records, pages=info.pages)


class PageOut(BaseModel, Generic[T]):
    pagination: Pagination
    data: list[T] = Field(default_factory=list)


class ListRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    page: int | None = None
    limit: int | None = None
    sort: str | None = None
    order: str | None = None


# --- Tasks -------------------------------------------------------------------


class TaskOut(BaseModel):
    id: str
    board_id: str
    organization_id: str
    owner_id: str
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_at: str | None
    created_at: str
    updated_at: str
    deleted_at: str | None

    @classmethod
    def from_row(cls, t: Task) -> TaskOut:
        return cls(
            id=t.id,
            board_id=t.board_id,
            organization_id=t.organization_id,
            owner_id=t.owner_id,
            title=t.title,
            description=t.description,
            status=t.status,
            priority=t.priority,
            due_at=iso(t.due_at),
            created_at=iso(t.created_at),
            updated_at=iso(t.updated_at),
            deleted_at=iso(t.deleted_at),
        )


class TaskSummary(BaseModel):
    id: str
    board_id: str
    owner_id: str
    title: str
    status: TaskStatus
    priority: TaskPriority
    due_at: str | None
    created_at: str

    @classmethod
    def from_row(cls, t: Task) -> TaskSummary:
        return cls(
            id=t.id,
            board_id=t.board_id,
            owner_id=t.owner_id,
            title=t.title,
            status=t.status,
            priority=t.priority,
            due_at=iso(t.due_at),
            created_at=iso(t.created_at),
        )


class TaskListRequest(ListRequest):
    search: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    board_id: str | None = None
    organization_id: str | None = None
    owner_id: str | None = None
    due_from: datetime | None = None
    due_to: datetime | None = None


class TaskCreate(BaseModel):
    board_id: str
    title: str = Field(min_length=1, max_length=256)
    description: str | None = None
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium
    due_at: datetime | None = None


class TaskUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=256)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_at: datetime | None = None


# --- Boards ------------------------------------------------------------------


class BoardOut(BaseModel):
    id: str
    organization_id: str
    owner_id: str
    name: str
    description: str | None
    created_at: str
    updated_at: str
    deleted_at: str | None

    @classmethod
    def from_row(cls, b: Board) -> BoardOut:
        return cls(
            id=b.id,
            organization_id=b.organization_id,
            owner_id=b.owner_id,
            name=b.name,
            description=b.description,
            created_at=iso(b.created_at),
            updated_at=iso(b.updated_at),
            deleted_at=iso(b.deleted_at),
        )


class BoardListRequest(ListRequest):
    search: str | None = None
    organization_id: str | None = None
    owner_id: str | None = None


class BoardCreate(BaseModel):
    organization_id: str
    name: str = Field(min_length=1, max_length=256)
    description: str | None = None


class MembershipOut(BaseModel):
    id: str
    board_id: str
    member_id: str
    created_at: str
    deleted_at: str | None

    @classmethod
    def from_row(cls, m: BoardMembership) -> MembershipOut:
        return cls(
            id=m.id,
            board_id=m.board_id,
            member_id=m.member_id,
            created_at=iso(m.created_at),
            deleted_at=iso(m.deleted_at),
        )


class MembershipCreate(BaseModel):
    member_id: str


# --- Notifications -----------------------------------------------------------


class NotificationOut(BaseModel):
    id: str
    recipient_id: str
    title: str
    body: str | None
    read_at: str | None
    created_at: str

    @classmethod
    def from_row(cls, n: Notification) -> NotificationOut:
        return cls(
            id=n.id,
            recipient_id=n.recipient_id,
            title=n.title,
            body=n.body,
            read_at=iso(n.read_at),
            created_at=iso(n.created_at),
        )


class NotificationListRequest(ListRequest):
    search: str | None = None
    is_read: bool | None = None
    recipient_id: str | None = None


# --- Member accounts ---------------------------------------------------------


class MemberOut(BaseModel):
    id: str
    email: str
    name: str
    created_at: str
    deleted_at: str | None

    @classmethod
    def from_row(cls, m: Member) -> MemberOut:
        return cls(
            id=m.id,
            email=m.email,
            name=m.name,
            created_at=iso(m.created_at),
            deleted_at=iso(m.deleted_at),
        )


class MemberCreate(BaseModel):
    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str = Field(min_length=1, max_length=256)


# --- Audit trail -------------------------------------------------------------


class AuditEventOut(BaseModel):
    id: str
    actor_id: str
    actor_role: str
    operation: str
    target_type: str
    target_id: str
    details: dict[str, Any]
    created_at: str

    @classmethod
    def from_row(cls, ev: AuditEvent) -> AuditEventOut:
        return cls(
            id=ev.id,
            actor_id=ev.actor_id,
            actor_role=ev.actor_role,
            operation=ev.operation,
            target_type=ev.target_type,
            target_id=ev.target_id,
            details=ev.details,
            created_at=iso(ev.created_at),
        )


# --- Module Notes -----------------------------------------------------------
# Nullable fields are always serialized (as null); routers never set
# `response_model_exclude_none`.
