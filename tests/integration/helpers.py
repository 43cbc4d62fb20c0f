from httpx import AsyncClient

PASSWORD = "SecurePass123!"


async def register(client: AsyncClient, email: str, password: str = PASSWORD) -> dict:
    response = await client.post("/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


async def login(client: AsyncClient, email: str, password: str = PASSWORD) -> dict:
    response = await client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


async def refresh(client: AsyncClient, session_token: str):
    return await client.post("/auth/refresh", json={"session_token": session_token})


def bearer(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


def assert_invalid_or_expired(response):
    assert response.status_code == 401
    assert response.json() == {
        "error": {"code": "INVALID_OR_EXPIRED", "message": "Invalid or expired credentials"}
    }
