import pytest
from httpx import AsyncClient

from tests.integration.helpers import PASSWORD, register


@pytest.mark.asyncio
async def test_successful_signup(client: AsyncClient, delivery):
    response = await client.post(
        "/auth/signup", json={"email": "New.User@Example.com", "password": PASSWORD}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["email_verified"] is False
    assert "access_token" not in data
    assert delivery.verifications[0][0] == "new.user@example.com"


@pytest.mark.asyncio
async def test_duplicate_email(client: AsyncClient):
    await register(client, "user@example.com")

    response = await client.post(
        "/auth/signup", json={"email": "USER@example.com", "password": PASSWORD}
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_weak_password(client: AsyncClient):
    response = await client.post(
        "/auth/signup", json={"email": "user@example.com", "password": "short"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"


@pytest.mark.asyncio
async def test_invalid_email(client: AsyncClient):
    response = await client.post(
        "/auth/signup", json={"email": "not-an-email", "password": PASSWORD}
    )

    assert response.status_code == 422
