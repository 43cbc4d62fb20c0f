from datetime import timedelta

import pytest
from httpx import AsyncClient

from tests.fixtures.doubles import make_config
from tests.integration.helpers import (
    assert_invalid_or_expired,
    bearer,
    login,
    refresh,
    register,
)


@pytest.mark.asyncio
async def test_refresh_issues_new_access_token(client: AsyncClient, auth, clock):
    await register(client, "user@example.com")
    session = await login(client, "user@example.com")
    clock.advance(timedelta(minutes=20))

    response = await refresh(client, session["session_token"])

    assert response.status_code == 200
    data = response.json()
    assert data["session_token"] is None
    assert auth.tokens.verify_access_token(data["access_token"]) is not None

    me = await client.get("/auth/me", headers=bearer(data["access_token"]))
    assert me.status_code == 200


@pytest.mark.asyncio
async def test_session_token_is_reused_across_refreshes(client: AsyncClient):
    await register(client, "user@example.com")
    session = await login(client, "user@example.com")

    for _ in range(3):
        response = await refresh(client, session["session_token"])
        assert response.status_code == 200


@pytest.mark.asyncio
async def test_refresh_with_unknown_token(client: AsyncClient):
    response = await refresh(client, "never-issued")

    assert_invalid_or_expired(response)


@pytest.mark.asyncio
async def test_session_expiring_exactly_now(client: AsyncClient, clock):
    await register(client, "user@example.com")
    session = await login(client, "user@example.com")

    clock.advance(timedelta(days=30) - timedelta(seconds=1))
    assert (await refresh(client, session["session_token"])).status_code == 200

    clock.advance(timedelta(seconds=1))
    assert_invalid_or_expired(await refresh(client, session["session_token"]))


@pytest.mark.asyncio
async def test_access_token_is_not_a_session_token(client: AsyncClient):
    await register(client, "user@example.com")
    session = await login(client, "user@example.com")

    assert_invalid_or_expired(await refresh(client, session["access_token"]))


class TestRotation:
    @pytest.fixture
    def config(self):
        return make_config(ROTATE_SESSION_TOKENS=True)

    @pytest.mark.asyncio
    async def test_rotation_replaces_session_token(self, client: AsyncClient):
        await register(client, "user@example.com")
        session = await login(client, "user@example.com")

        response = await refresh(client, session["session_token"])

        assert response.status_code == 200
        rotated = response.json()["session_token"]
        assert rotated and rotated != session["session_token"]
        assert_invalid_or_expired(await refresh(client, session["session_token"]))
        assert (await refresh(client, rotated)).status_code == 200
