"""
tests.test_tasks_api

Task endpoints end to end: principal resolution, visibility scoping, ownership
checks, soft delete and administrator restore.
"""

from __future__ import annotations

import pytest

from guarded_api.db.repositories.audit import AuditRepo


def _ids(resp) -> list[str]:
    return [row["id"] for row in resp.json()["data"]]


@pytest.mark.asyncio
async def test_member_lists_only_own_tasks_even_with_foreign_owner_filter(client, auth, world) -> None:
    r = await client.patch("/v1/tasks", json={}, headers=auth(world.alice, "member"))
    assert r.status_code == 200
    assert _ids(r) == [world.task_alice]

    r = await client.patch(
        "/v1/tasks", json={"owner_id": world.bob}, headers=auth(world.alice, "member")
    )
    assert _ids(r) == [world.task_alice]


@pytest.mark.asyncio
async def test_staff_sees_own_tenant_and_foreign_tenant_filter_is_ignored(client, auth, world) -> None:
    r = await client.patch(
        "/v1/tasks", json={"organization_id": world.org_b}, headers=auth(world.staff_a, "staff")
    )
    assert r.status_code == 200
    body = r.json()
    assert body["pagination"] == {"current": 1, "limit": 20, "records": 2, "pages": 1}
    assert _ids(r) == [world.task_bob, world.task_alice]


@pytest.mark.asyncio
async def test_admin_may_filter_on_any_tenant(client, auth, world) -> None:
    r = await client.patch(
        "/v1/tasks", json={"organization_id": world.org_b}, headers=auth(world.admin, "admin")
    )
    assert _ids(r) == [world.task_b]


@pytest.mark.asyncio
async def test_staff_without_tenant_assignment_is_forbidden(client, auth, world) -> None:
    r = await client.patch("/v1/tasks", json={}, headers=auth(world.staff_unassigned, "staff"))
    assert r.status_code == 403
    assert r.json()["reason"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_search_and_due_range_filters(client, auth, world) -> None:
    headers = auth(world.admin, "admin")
    r = await client.patch("/v1/tasks", json={"search": "REPORT"}, headers=headers)
    assert set(_ids(r)) == {world.task_alice, world.task_bob}

    r = await client.patch(
        "/v1/tasks",
        json={"due_from": "2024-01-03T00:00:00Z", "due_to": "2024-01-05T00:00:00Z"},
        headers=headers,
    )
    assert _ids(r) == [world.task_alice]

    r = await client.patch(
        "/v1/tasks",
        json={"due_from": "2024-01-05T00:00:00Z", "due_to": "2024-01-03T00:00:00Z"},
        headers=headers,
    )
    assert r.status_code == 422
    assert r.json()["error"] == "VALIDATION"


@pytest.mark.asyncio
async def test_pagination_contract(client, auth, world) -> None:
    headers = auth(world.admin, "admin")

    r = await client.patch("/v1/tasks", json={"limit": 2}, headers=headers)
    assert r.json()["pagination"] == {"current": 1, "limit": 2, "records": 3, "pages": 2}
    assert len(r.json()["data"]) == 2

    r = await client.patch("/v1/tasks", json={"page": 5, "limit": 2}, headers=headers)
    assert r.json()["pagination"]["records"] == 3
    assert r.json()["data"] == []

    r = await client.patch("/v1/tasks", json={"limit": 1000}, headers=headers)
    assert r.json()["pagination"]["limit"] == 100

    r = await client.patch("/v1/tasks", json={"limit": 0}, headers=headers)
    assert r.status_code == 422
    assert r.json()["error"] == "VALIDATION"


@pytest.mark.asyncio
async def test_sorting_allow_list_with_default_fallback(client, auth, world) -> None:
    headers = auth(world.admin, "admin")

    r = await client.patch("/v1/tasks", json={"sort": "title", "order": "asc"}, headers=headers)
    assert [row["title"] for row in r.json()["data"]] == [
        "Plan quarter",
        "Review report",
        "Write report",
    ]

    r = await client.patch("/v1/tasks", json={"sort": "owner_id", "order": "asc"}, headers=headers)
    assert _ids(r) == [world.task_b, world.task_bob, world.task_alice]


@pytest.mark.asyncio
async def test_get_task_by_owner_member_staff_and_stranger(client, auth, world) -> None:
    url = f"/v1/tasks/{world.task_alice}"

    r = await client.get(url, headers=auth(world.alice, "member"))
    assert r.status_code == 200
    body = r.json()
    assert body["deleted_at"] is None
    assert body["description"] is None
    assert body["due_at"] == "2024-01-04T09:00:00+00:00"

    assert (await client.get(url, headers=auth(world.bob, "member"))).status_code == 200
    assert (await client.get(url, headers=auth(world.staff_a, "staff"))).status_code == 200

    r = await client.get(url, headers=auth(world.carol, "member"))
    assert r.status_code == 403
    assert r.json() == {"error": "AUTHORIZATION", "reason": "FORBIDDEN", "detail": "forbidden"}

    r = await client.get(url, headers=auth(world.staff_b, "staff"))
    assert r.status_code == 404
    assert r.json()["error"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_unknown_task_is_not_found(client, auth, world) -> None:
    r = await client.get("/v1/tasks/nope", headers=auth(world.admin, "admin"))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_create_task_requires_access_to_board(client, auth, world) -> None:
    payload = {"board_id": world.board_a, "title": "Fix typo", "priority": "URGENT"}

    r = await client.post("/v1/tasks", json=payload, headers=auth(world.bob, "member"))
    assert r.status_code == 201
    body = r.json()
    assert body["owner_id"] == world.bob
    assert body["organization_id"] == world.org_a
    assert body["status"] == "TODO"
    assert body["priority"] == "URGENT"

    r = await client.post("/v1/tasks", json=payload, headers=auth(world.carol, "member"))
    assert r.status_code == 403

    r = await client.post(
        "/v1/tasks", json={**payload, "board_id": world.board_a}, headers=auth(world.staff_b, "staff")
    )
    assert r.status_code == 404

    r = await client.post(
        "/v1/tasks", json={**payload, "board_id": "missing"}, headers=auth(world.admin, "admin")
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_update_task_is_partial_and_rejects_null_required_fields(client, auth, world) -> None:
    url = f"/v1/tasks/{world.task_alice}"
    headers = auth(world.alice, "member")

    r = await client.put(url, json={"status": "DONE"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "DONE"
    assert r.json()["title"] == "Write report"

    r = await client.put(url, json={"title": None}, headers=headers)
    assert r.status_code == 422
    assert r.json()["error"] == "VALIDATION"

    r = await client.put(url, json={"due_at": None}, headers=headers)
    assert r.status_code == 200
    assert r.json()["due_at"] is None


@pytest.mark.asyncio
async def test_delete_hides_task_until_admin_restores_it(app, client, auth, world) -> None:
    url = f"/v1/tasks/{world.task_alice}"
    admin = auth(world.admin, "admin")

    r = await client.delete(url, headers=auth(world.alice, "member"))
    assert r.status_code == 204

    assert (await client.get(url, headers=auth(world.alice, "member"))).status_code == 404
    assert (await client.get(url, headers=admin)).status_code == 404
    r = await client.patch("/v1/tasks", json={}, headers=admin)
    assert world.task_alice not in _ids(r)

    r = await client.post(f"{url}/restore", headers=auth(world.alice, "member"))
    assert r.status_code == 403
    assert r.json()["reason"] == "ROLE_MISMATCH"

    r = await client.post(f"{url}/restore", headers=admin)
    assert r.status_code == 200
    assert r.json()["deleted_at"] is None
    assert (await client.get(url, headers=auth(world.alice, "member"))).status_code == 200

    r = await client.post(f"{url}/restore", headers=admin)
    assert r.status_code == 409

    async with app.state.sessionmaker() as session:
        events = await AuditRepo(session).list_for_target("task", world.task_alice)
    assert {(e.operation, e.actor_role) for e in events} == {
        ("DELETE", "member"),
        ("RESTORE", "admin"),
    }


@pytest.mark.asyncio
async def test_authentication_and_enrollment_failures(client, auth, world) -> None:
    r = await client.patch("/v1/tasks", json={})
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"
    assert r.json()["error"] == "AUTHENTICATION"

    r = await client.patch("/v1/tasks", json={}, headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401

    r = await client.patch("/v1/tasks", json={}, headers=auth(world.alice, "pmo"))
    assert r.status_code == 403
    assert r.json()["reason"] == "ROLE_MISMATCH"

    r = await client.patch("/v1/tasks", json={}, headers=auth("ghost", "member"))
    assert r.status_code == 403
    assert r.json()["reason"] == "NOT_ENROLLED"

    r = await client.patch("/v1/tasks", json={}, headers=auth(world.retired_member, "member"))
    assert r.json()["reason"] == "NOT_ENROLLED"

    # A real staff id claiming the member role has no member row.
    r = await client.patch("/v1/tasks", json={}, headers=auth(world.staff_a, "member"))
    assert r.json()["reason"] == "NOT_ENROLLED"


@pytest.mark.asyncio
async def test_page_far_past_the_end_is_empty_not_an_error(client, auth, world) -> None:
    r = await client.patch(
        "/v1/tasks", json={"page": 10**18, "limit": 100}, headers=auth(world.admin, "admin")
    )
    assert r.status_code == 200
    assert r.json()["data"] == []
    assert r.json()["pagination"]["records"] == 3
    assert r.json()["pagination"]["current"] == 10**18


@pytest.mark.asyncio
async def test_admin_reads_task_audit_trail(client, auth, world) -> None:
    url = f"/v1/tasks/{world.task_bob}"
    admin = auth(world.admin, "admin")
    assert (await client.delete(url, headers=admin)).status_code == 204
    assert (await client.post(f"{url}/restore", headers=admin)).status_code == 200

    r = await client.get(f"/v1/admin/audit/task/{world.task_bob}", headers=admin)
    assert r.status_code == 200
    assert sorted(ev["operation"] for ev in r.json()) == ["DELETE", "RESTORE"]
    assert {ev["actor_id"] for ev in r.json()} == {world.admin}

    r = await client.get(
        f"/v1/admin/audit/task/{world.task_bob}", headers=auth(world.bob, "member")
    )
    assert r.status_code == 403
    assert r.json()["reason"] == "ROLE_MISMATCH"
