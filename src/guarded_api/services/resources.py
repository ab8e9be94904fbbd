"""
guarded_api.services.resources

Listable resource descriptions: scope columns, filterable columns, sort allow-lists
and default page sizes.
"""

from __future__ import annotations

from guarded_api.db.models import Board, BoardMembership, Notification, Task
from guarded_api.query.sorting import SortDirection, SortSpec
from guarded_api.query.visibility import ResourceSpec

TASKS = ResourceSpec(
    name="task",
    model=Task,
    owner_field="owner_id",
    tenant_field="organization_id",
    filterable=frozenset(
        {"title", "status", "priority", "board_id", "organization_id", "owner_id", "due_at"}
    ),
    sort=SortSpec(
        allowed=frozenset({"created_at", "updated_at", "title", "status", "priority", "due_at"}),
        default_field="created_at",
        default_direction=SortDirection.desc,
    ),
)

BOARDS = ResourceSpec(
    name="board",
    model=Board,
    owner_field="owner_id",
    tenant_field="organization_id",
    filterable=frozenset({"name", "organization_id", "owner_id"}),
    sort=SortSpec(allowed=frozenset({"created_at", "name"})),
    default_limit=10,
)

BOARD_MEMBERSHIPS = ResourceSpec(
    name="board_membership",
    model=BoardMembership,
    owner_field="member_id",
    tenant_field=None,
    filterable=frozenset({"board_id", "member_id"}),
    sort=SortSpec(
        allowed=frozenset({"created_at"}),
        default_field="created_at",
        default_direction=SortDirection.asc,
    ),
)

NOTIFICATIONS = ResourceSpec(
    name="notification",
    model=Notification,
    owner_field="recipient_id",
    tenant_field=None,
    filterable=frozenset({"title", "read_at", "recipient_id"}),
    sort=SortSpec(allowed=frozenset({"created_at", "read_at"})),
)
