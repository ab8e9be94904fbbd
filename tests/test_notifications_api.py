"""
tests.test_notifications_api

Notification endpoints (recipient-scoped for members).
"""

from __future__ import annotations

import pytest

from guarded_api.db.repositories.audit import AuditRepo


@pytest.mark.asyncio
async def test_member_lists_own_notifications(client, auth, world) -> None:
    headers = auth(world.alice, "member")

    r = await client.patch("/v1/notifications", json={}, headers=headers)
    assert [n["id"] for n in r.json()["data"]] == [world.note_unread, world.note_read]

    r = await client.patch("/v1/notifications", json={"is_read": False}, headers=headers)
    assert [n["id"] for n in r.json()["data"]] == [world.note_unread]
    assert r.json()["data"][0]["read_at"] is None

    r = await client.patch("/v1/notifications", json={"recipient_id": world.bob}, headers=headers)
    assert r.json()["pagination"]["records"] == 2


@pytest.mark.asyncio
async def test_admin_lists_any_recipient(client, auth, world) -> None:
    r = await client.patch(
        "/v1/notifications", json={"recipient_id": world.bob}, headers=auth(world.admin, "admin")
    )
    assert [n["id"] for n in r.json()["data"]] == [world.note_bob]


@pytest.mark.asyncio
async def test_foreign_notification_is_forbidden(client, auth, world) -> None:
    r = await client.get(f"/v1/notifications/{world.note_bob}", headers=auth(world.alice, "member"))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_mark_read_is_idempotent_and_audited_once(app, client, auth, world) -> None:
    url = f"/v1/notifications/{world.note_unread}/read"
    headers = auth(world.alice, "member")

    first = await client.post(url, headers=headers)
    assert first.status_code == 200
    assert first.json()["read_at"] is not None

    second = await client.post(url, headers=headers)
    assert second.json()["read_at"] == first.json()["read_at"]

    async with app.state.sessionmaker() as session:
        events = await AuditRepo(session).list_for_target("notification", world.note_unread)
    assert [(e.operation, e.actor_id) for e in events] == [("UPDATE", world.alice)]
    assert events[0].details == {"read_at": first.json()["read_at"]}


@pytest.mark.asyncio
async def test_staff_role_may_not_call_notification_endpoints(client, auth, world) -> None:
    r = await client.patch("/v1/notifications", json={}, headers=auth(world.staff_a, "staff"))
    assert r.status_code == 403
    assert r.json()["reason"] == "ROLE_MISMATCH"
