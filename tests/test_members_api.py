"""
tests.test_members_api

Administrator member-account endpoints.
"""

from __future__ import annotations

import pytest

from guarded_api.db.repositories.accounts import AccountRepo
from guarded_api.errors import ConflictError


@pytest.mark.asyncio
async def test_create_member_normalizes_email_and_rejects_duplicates(client, auth, world) -> None:
    admin = auth(world.admin, "admin")

    r = await client.post(
        "/v1/admin/members", json={"email": "Dave@Example.com", "name": "Dave"}, headers=admin
    )
    assert r.status_code == 201
    assert r.json()["email"] == "dave@example.com"
    assert r.json()["deleted_at"] is None

    r = await client.post(
        "/v1/admin/members", json={"email": "dave@example.com", "name": "Dave 2"}, headers=admin
    )
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_retired_email_can_be_reused(client, auth, world) -> None:
    r = await client.post(
        "/v1/admin/members",
        json={"email": "gone@example.com", "name": "Back"},
        headers=auth(world.admin, "admin"),
    )
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_new_member_resolves_immediately(client, auth, world) -> None:
    r = await client.post(
        "/v1/admin/members",
        json={"email": "erin@example.com", "name": "Erin"},
        headers=auth(world.admin, "admin"),
    )
    member_id = r.json()["id"]

    r = await client.patch("/v1/notifications", json={}, headers=auth(member_id, "member"))
    assert r.status_code == 200
    assert r.json() == {
        "pagination": {"current": 1, "limit": 20, "records": 0, "pages": 0},
        "data": [],
    }


@pytest.mark.asyncio
async def test_retired_member_is_no_longer_enrolled(client, auth, world) -> None:
    admin = auth(world.admin, "admin")

    r = await client.delete(f"/v1/admin/members/{world.alice}", headers=admin)
    assert r.status_code == 200
    assert r.json()["deleted_at"] is not None

    r = await client.patch("/v1/notifications", json={}, headers=auth(world.alice, "member"))
    assert r.status_code == 403
    assert r.json()["reason"] == "NOT_ENROLLED"

    r = await client.delete(f"/v1/admin/members/{world.alice}", headers=admin)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_member_endpoints_require_admin(client, auth, world) -> None:
    r = await client.post(
        "/v1/admin/members",
        json={"email": "x@example.com", "name": "X"},
        headers=auth(world.alice, "member"),
    )
    assert r.status_code == 403
    assert r.json()["reason"] == "ROLE_MISMATCH"


@pytest.mark.asyncio
async def test_invalid_email_is_rejected_by_request_validation(client, auth, world) -> None:
    r = await client.post(
        "/v1/admin/members",
        json={"email": "not-an-email", "name": "X"},
        headers=auth(world.admin, "admin"),
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_store_rejects_second_active_member_with_same_email(app, world) -> None:
    # Two racing creates can both pass the lookup; the partial unique index stops the second.
    async with app.state.sessionmaker() as session:
        with pytest.raises(ConflictError):
            await AccountRepo(session).create_member(email="alice@example.com", name="Alice 2")

    async with app.state.sessionmaker() as session:
        member = await AccountRepo(session).create_member(email="gone@example.com", name="Back")
        assert member.deleted_at is None
