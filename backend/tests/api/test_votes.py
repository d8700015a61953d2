"""Tests for dashboard vote endpoints."""
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.vote import Vote
from tests.api.conftest import register_and_login


async def _vote_count(db_session: AsyncSession) -> int:
    return await db_session.scalar(select(func.count()).select_from(Vote))


async def test_vote_up_is_saved(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    response = await client.post(
        "/api/vote", json={"section": "news", "vote": "up"}, headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Vote saved"
    assert data["section"] == "news"
    assert data["vote"] == "up"
    assert "updatedAt" in data

    votes = await client.get("/api/votes", headers=auth_headers)
    assert votes.json() == {"votes": {"news": "up"}}


async def test_vote_change_replaces_previous_vote(
    client: AsyncClient, auth_headers: dict[str, str], db_session: AsyncSession,
) -> None:
    """up then down leaves exactly one row holding down."""
    await client.post("/api/vote", json={"section": "ai", "vote": "up"}, headers=auth_headers)
    await client.post("/api/vote", json={"section": "ai", "vote": "down"}, headers=auth_headers)

    votes = await client.get("/api/votes", headers=auth_headers)
    assert votes.json() == {"votes": {"ai": "down"}}
    assert await _vote_count(db_session) == 1


async def test_vote_none_clears_vote(
    client: AsyncClient, auth_headers: dict[str, str], db_session: AsyncSession,
) -> None:
    await client.post("/api/vote", json={"section": "meme", "vote": "up"}, headers=auth_headers)

    response = await client.post(
        "/api/vote", json={"section": "meme", "vote": "none"}, headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Vote cleared"
    votes = await client.get("/api/votes", headers=auth_headers)
    assert votes.json() == {"votes": {}}
    assert await _vote_count(db_session) == 0


async def test_vote_none_without_existing_vote_succeeds(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    response = await client.post(
        "/api/vote", json={"section": "prices", "vote": "none"}, headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Vote cleared"


async def test_votes_are_per_section_and_per_user(client: AsyncClient) -> None:
    alice = await register_and_login(client)
    bob = await register_and_login(client, name="Bob", email="bob@example.com")

    await client.post("/api/vote", json={"section": "news", "vote": "up"}, headers=alice)
    await client.post("/api/vote", json={"section": "prices", "vote": "down"}, headers=alice)
    await client.post("/api/vote", json={"section": "news", "vote": "down"}, headers=bob)

    alice_votes = await client.get("/api/votes", headers=alice)
    bob_votes = await client.get("/api/votes", headers=bob)
    assert alice_votes.json() == {"votes": {"news": "up", "prices": "down"}}
    assert bob_votes.json() == {"votes": {"news": "down"}}


async def test_vote_invalid_section_returns_400(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    response = await client.post(
        "/api/vote", json={"section": "weather", "vote": "up"}, headers=auth_headers,
    )

    assert response.status_code == 400
    data = response.json()
    assert data["field"] == "section"
    assert data["allowed"] == ["news", "prices", "ai", "meme"]


async def test_vote_invalid_value_returns_400(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    response = await client.post(
        "/api/vote", json={"section": "news", "vote": "sideways"}, headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["field"] == "vote"


async def test_vote_missing_fields_returns_400(
    client: AsyncClient, auth_headers: dict[str, str],
) -> None:
    response = await client.post("/api/vote", json={"section": "news"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing fields"


async def test_vote_requires_auth(client: AsyncClient) -> None:
    response = await client.post("/api/vote", json={"section": "news", "vote": "up"})
    assert response.status_code == 401
