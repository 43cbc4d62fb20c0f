import pytest
from httpx import AsyncClient

from tests.integration.helpers import assert_invalid_or_expired, register


@pytest.mark.asyncio
async def test_resend_supersedes_previous_token(client: AsyncClient, delivery):
    await register(client, "user@example.com")
    original = delivery.last_verification_token()

    response = await client.post("/auth/resend-verification", json={"email": "user@example.com"})

    assert response.status_code == 200
    fresh = delivery.last_verification_token()
    assert fresh != original
    assert_invalid_or_expired(
        await client.post("/auth/verify-email", json={"token": original})
    )
    assert (await client.post("/auth/verify-email", json={"token": fresh})).status_code == 200


@pytest.mark.asyncio
async def test_resend_after_verification_sends_nothing(client: AsyncClient, delivery):
    await register(client, "user@example.com")
    await client.post("/auth/verify-email", json={"token": delivery.last_verification_token()})

    response = await client.post("/auth/resend-verification", json={"email": "user@example.com"})

    assert response.status_code == 200
    assert len(delivery.verifications) == 1


@pytest.mark.asyncio
async def test_resend_for_unknown_email(client: AsyncClient, delivery):
    response = await client.post(
        "/auth/resend-verification", json={"email": "ghost@example.com"}
    )

    assert response.status_code == 200
    assert delivery.verifications == []
