"""Shared fixtures for API tests."""
import pytest
from httpx import AsyncClient


async def register_and_login(
    client: AsyncClient,
    name: str = "Alice",
    email: str = "alice@example.com",
    password: str = "correct horse battery staple",
) -> dict[str, str]:
    """Register a user through the API and return bearer auth headers."""
    response = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 200, response.text

    response = await client.post(
        "/api/auth/login",
        json={"email": email, "password": password},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Bearer headers for a freshly registered user."""
    return await register_and_login(client)
