import pytest
from httpx import AsyncClient

from tests.integration.helpers import (
    PASSWORD,
    assert_invalid_or_expired,
    bearer,
    login,
    refresh,
    register,
)

NEW_PASSWORD = "BrandNewPass456!"


@pytest.mark.asyncio
async def test_change_password_revokes_all_sessions(client: AsyncClient):
    await register(client, "user@example.com")
    phone = await login(client, "user@example.com")
    laptop = await login(client, "user@example.com")

    response = await client.post(
        "/auth/change-password",
        json={"current_password": PASSWORD, "new_password": NEW_PASSWORD},
        headers=bearer(phone["access_token"]),
    )

    assert response.status_code == 200
    assert_invalid_or_expired(await refresh(client, phone["session_token"]))
    assert_invalid_or_expired(await refresh(client, laptop["session_token"]))
    await login(client, "user@example.com", NEW_PASSWORD)


@pytest.mark.asyncio
async def test_wrong_current_password(client: AsyncClient):
    await register(client, "user@example.com")
    session = await login(client, "user@example.com")

    response = await client.post(
        "/auth/change-password",
        json={"current_password": "NotMyPassword!", "new_password": NEW_PASSWORD},
        headers=bearer(session["access_token"]),
    )

    assert_invalid_or_expired(response)
    assert (await refresh(client, session["session_token"])).status_code == 200


@pytest.mark.asyncio
async def test_change_password_requires_access_token(client: AsyncClient):
    response = await client.post(
        "/auth/change-password",
        json={"current_password": PASSWORD, "new_password": NEW_PASSWORD},
    )

    assert_invalid_or_expired(response)
