from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select

from marketplace_auth.domain.entities import User
from tests.integration.helpers import (
    assert_invalid_or_expired,
    login,
    refresh,
    register,
)

NEW_PASSWORD = "NewSecurePass456!"


async def request_reset(client, delivery, email="user@example.com"):
    response = await client.post("/auth/request-password-reset", json={"email": email})
    assert response.status_code == 200
    return delivery.last_reset_token()


async def confirm(client, token, new_password=NEW_PASSWORD):
    return await client.post(
        "/auth/confirm-password-reset", json={"token": token, "new_password": new_password}
    )


@pytest.mark.asyncio
async def test_reset_changes_password_and_revokes_sessions(client: AsyncClient, delivery):
    await register(client, "user@example.com")
    phone = await login(client, "user@example.com")
    laptop = await login(client, "user@example.com")
    token = await request_reset(client, delivery)

    response = await confirm(client, token)

    assert response.status_code == 200
    assert_invalid_or_expired(await refresh(client, phone["session_token"]))
    assert_invalid_or_expired(await refresh(client, laptop["session_token"]))

    old = await client.post(
        "/auth/login", json={"email": "user@example.com", "password": "SecurePass123!"}
    )
    assert_invalid_or_expired(old)
    await login(client, "user@example.com", NEW_PASSWORD)


@pytest.mark.asyncio
async def test_reset_token_is_single_use(client: AsyncClient, delivery, db_session):
    await register(client, "user@example.com")
    token = await request_reset(client, delivery)

    assert (await confirm(client, token)).status_code == 200
    second = await confirm(client, token, "YetAnotherPass789!")

    assert_invalid_or_expired(second)
    user = (await db_session.exec(select(User))).one()
    assert user.reset_token_hash is None
    assert user.reset_token_expires_at is None
    await login(client, "user@example.com", NEW_PASSWORD)


@pytest.mark.asyncio
async def test_only_the_latest_reset_token_works(client: AsyncClient, delivery, caplog):
    await register(client, "user@example.com")
    first = await request_reset(client, delivery)
    second = await request_reset(client, delivery)

    with caplog.at_level("WARNING"):
        stale = await confirm(client, first)

    assert_invalid_or_expired(stale)
    assert any("TOKEN_CONSUMED" in record.getMessage() for record in caplog.records)
    assert (await confirm(client, second)).status_code == 200


@pytest.mark.asyncio
async def test_expired_reset_token(client: AsyncClient, delivery, clock):
    await register(client, "user@example.com")
    token = await request_reset(client, delivery)
    clock.advance(timedelta(hours=1))

    assert_invalid_or_expired(await confirm(client, token))


@pytest.mark.asyncio
async def test_weak_new_password(client: AsyncClient, delivery):
    await register(client, "user@example.com")
    token = await request_reset(client, delivery)

    response = await confirm(client, token, "short")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"
    # Token is still usable after a rejected password
    assert (await confirm(client, token)).status_code == 200


@pytest.mark.asyncio
async def test_forged_reset_token(client: AsyncClient):
    assert_invalid_or_expired(await confirm(client, "forged.token.value"))
