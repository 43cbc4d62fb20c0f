from datetime import timedelta

import pytest
from httpx import AsyncClient

from marketplace_auth.adapter.repositories.session_repository import SessionRepository
from tests.fixtures.doubles import ADMIN_API_KEY, make_config
from tests.integration.helpers import assert_invalid_or_expired, login, refresh, register

ADMIN = {"X-Admin-API-Key": ADMIN_API_KEY}


@pytest.mark.asyncio
async def test_admin_revokes_user_sessions(client: AsyncClient):
    signup = await register(client, "user@example.com")
    sessions = [await login(client, "user@example.com") for _ in range(2)]

    response = await client.post(
        f"/admin/users/{signup['user']['id']}/revoke-sessions", headers=ADMIN
    )

    assert response.status_code == 200
    assert response.json()["revoked_count"] == 2
    for session in sessions:
        assert_invalid_or_expired(await refresh(client, session["session_token"]))


@pytest.mark.asyncio
async def test_admin_sweep_removes_only_expired_sessions(
    client: AsyncClient, auth, clock, db_session
):
    signup = await register(client, "user@example.com")
    live = await login(client, "user@example.com")
    store = SessionRepository(db_session, auth.settings.session_token_secret)
    user_id = (await store.find_by_token(live["session_token"])).user_id
    await store.create(user_id, clock.now() - timedelta(minutes=1))
    await store.create(user_id, clock.now())
    await db_session.commit()

    response = await client.post("/admin/sessions/sweep", headers=ADMIN)

    assert response.status_code == 200
    assert response.json() == {"deleted_count": 2}
    assert (await refresh(client, live["session_token"])).status_code == 200
    assert signup["user"]["id"] == str(user_id)


@pytest.mark.asyncio
@pytest.mark.parametrize("headers", [{}, {"X-Admin-API-Key": "wrong-key"}])
async def test_admin_key_required(client: AsyncClient, headers):
    response = await client.post("/admin/sessions/sweep", headers=headers)

    assert response.status_code == 401


class TestWithoutAdminKey:
    @pytest.fixture
    def config(self):
        return make_config(ADMIN_API_KEY=None)

    @pytest.mark.asyncio
    async def test_admin_endpoints_are_closed(self, client: AsyncClient):
        response = await client.post(
            "/admin/sessions/sweep", headers={"X-Admin-API-Key": "anything"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_API_KEY"
