"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app starts and DB readiness check works in test mode.
- Ensure dev token minting works outside prod and is hidden in prod.
"""

from __future__ import annotations

import httpx
import pytest
from sqlalchemy import select

from guarded_api.api.app import create_app
from guarded_api.db.init_db import bootstrap_admin
from guarded_api.db.models import Administrator
from guarded_api.settings import Settings


@pytest.mark.asyncio
async def test_health_endpoints(client) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "guarded-api"}

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_request_id_is_propagated(client) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"


@pytest.mark.asyncio
async def test_dev_token_is_accepted_by_guarded_endpoints(client, world) -> None:
    r = await client.post("/v1/dev/token", json={"subject": world.alice, "role": "member"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = await client.patch(
        "/v1/tasks", json={}, headers={"Authorization": f"Bearer {token}"}
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_dev_token_is_hidden_in_prod() -> None:
    app = create_app(settings=Settings(env="prod", jwt_secret="prod-secret"))
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.post("/v1/dev/token", json={"subject": "x", "role": "admin"})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_bootstrap_admin_is_enrolled_once() -> None:
    settings = Settings(
        env="test",
        database_url="sqlite+aiosqlite:///:memory:",
        bootstrap_admin_email="Root@Example.com",
    )
    app = create_app(settings=settings)
    await app.router.startup()
    try:
        admin_id = await bootstrap_admin(
            app.state.sessionmaker, email="root@example.com", name="Root"
        )
        async with app.state.sessionmaker() as session:
            rows = (await session.execute(select(Administrator))).scalars().all()
        assert [a.id for a in rows] == [admin_id]
        assert rows[0].email == "root@example.com"
    finally:
        await app.router.shutdown()
