"""
tests.conftest

Shared fixtures for API-level tests.

Responsibilities:
- Boot the app against a fresh in-memory SQLite database per test.
- Seed a small two-tenant world (accounts, boards, tasks, notifications).
- Mint bearer tokens for any subject/role pair.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from guarded_api.api.app import create_app
from guarded_api.auth.deps import jwt_config
from guarded_api.auth.jwt import issue_token
from guarded_api.db.models import (
    Administrator,
    Board,
    BoardMembership,
    Member,
    Notification,
    Organization,
    OrgAssignment,
    StaffAccount,
    Task,
    TaskPriority,
    TaskStatus,
)
from guarded_api.settings import Settings

T0 = datetime(2024, 1, 1, 9, 0, 0)


@dataclass(frozen=True)
class World:
    org_a: str = "org-a"
    org_b: str = "org-b"
    org_retired: str = "org-retired"

    admin: str = "admin-1"
    staff_a: str = "staff-a"
    staff_b: str = "staff-b"
    staff_unassigned: str = "staff-x"

    alice: str = "member-alice"
    bob: str = "member-bob"
    carol: str = "member-carol"
    retired_member: str = "member-retired"

    board_a: str = "board-a"
    board_b: str = "board-b"
    membership_bob: str = "membership-bob"

    task_alice: str = "task-alice"
    task_bob: str = "task-bob"
    task_b: str = "task-b"

    note_unread: str = "note-unread"
    note_read: str = "note-read"
    note_bob: str = "note-bob"


def make_settings() -> Settings:
    return Settings(
        env="test",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret="test-secret",
        log_level="WARNING",
    )


async def seed(app: FastAPI, w: World) -> None:
    async with app.state.sessionmaker() as session:
        session.add_all(
            [
                Organization(id=w.org_a, name="Org A", code="A"),
                Organization(id=w.org_b, name="Org B", code="B"),
                Organization(id=w.org_retired, name="Old", code="OLD", deleted_at=T0),
                Administrator(id=w.admin, email="admin@example.com", name="Admin"),
                StaffAccount(id=w.staff_a, email="sa@example.com", name="Staff A"),
                StaffAccount(id=w.staff_b, email="sb@example.com", name="Staff B"),
                StaffAccount(id=w.staff_unassigned, email="sx@example.com", name="Staff X"),
                Member(id=w.alice, email="alice@example.com", name="Alice"),
                Member(id=w.bob, email="bob@example.com", name="Bob"),
                Member(id=w.carol, email="carol@example.com", name="Carol"),
                Member(
                    id=w.retired_member, email="gone@example.com", name="Gone", deleted_at=T0
                ),
            ]
        )
        await session.flush()
        session.add_all(
            [
                OrgAssignment(staff_id=w.staff_a, organization_id=w.org_a),
                OrgAssignment(staff_id=w.staff_b, organization_id=w.org_b),
                Board(id=w.board_a, organization_id=w.org_a, owner_id=w.alice, name="Alpha"),
                Board(id=w.board_b, organization_id=w.org_b, owner_id=w.staff_b, name="Beta"),
            ]
        )
        await session.flush()
        session.add_all(
            [
                BoardMembership(id=w.membership_bob, board_id=w.board_a, member_id=w.bob),
                Task(
                    id=w.task_alice,
                    board_id=w.board_a,
                    organization_id=w.org_a,
                    owner_id=w.alice,
                    title="Write report",
                    status=TaskStatus.todo,
                    priority=TaskPriority.high,
                    due_at=T0 + timedelta(days=3),
                    created_at=T0,
                ),
                Task(
                    id=w.task_bob,
                    board_id=w.board_a,
                    organization_id=w.org_a,
                    owner_id=w.bob,
                    title="Review report",
                    status=TaskStatus.in_progress,
                    priority=TaskPriority.low,
                    created_at=T0 + timedelta(hours=1),
                ),
                Task(
                    id=w.task_b,
                    board_id=w.board_b,
                    organization_id=w.org_b,
                    owner_id=w.staff_b,
                    title="Plan quarter",
                    status=TaskStatus.todo,
                    priority=TaskPriority.medium,
                    created_at=T0 + timedelta(hours=2),
                ),
                Notification(
                    id=w.note_unread, recipient_id=w.alice, title="Task assigned", created_at=T0
                ),
                Notification(
                    id=w.note_read,
                    recipient_id=w.alice,
                    title="Welcome",
                    read_at=T0,
                    created_at=T0 - timedelta(days=1),
                ),
                Notification(id=w.note_bob, recipient_id=w.bob, title="Board invite"),
            ]
        )
        await session.commit()


@pytest_asyncio.fixture
async def app() -> AsyncIterator[FastAPI]:
    app = create_app(settings=make_settings())
    # httpx ASGITransport does not run lifespan events; drive them explicitly.
    await app.router.startup()
    try:
        await seed(app, World())
        yield app
    finally:
        await app.router.shutdown()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def world() -> World:
    return World()


@pytest.fixture
def auth(app: FastAPI) -> Callable[[str, str], dict[str, str]]:
    cfg = jwt_config(app.state.settings)

    def headers(subject: str, role: str) -> dict[str, str]:
        token = issue_token(cfg=cfg, subject=subject, role=role)
        return {"Authorization": f"Bearer {token}"}

    return headers
