"""Tests for serving the prebuilt client application."""
from pathlib import Path

import pytest
from httpx import AsyncClient

from api.routers.spa import resolve_static_file
from core.config import get_settings
from tests.conftest import make_settings


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """A minimal client build."""
    (tmp_path / "index.html").write_text("<html>dashboard</html>")
    (tmp_path / "static").mkdir()
    (tmp_path / "static" / "app.js").write_text("console.log('app')")
    return tmp_path


@pytest.fixture
def serve_static(client: AsyncClient, static_dir: Path) -> Path:
    """Point the running app at the temporary build (after the client overrides)."""
    from api.main import app  # noqa: PLC0415

    app.dependency_overrides[get_settings] = lambda: make_settings(static_dir=str(static_dir))
    return static_dir


class TestResolveStaticFile:
    """Tests for mapping request paths to build files."""

    def test__resolve_static_file__existing_asset(self, static_dir: Path) -> None:
        assert resolve_static_file(static_dir, "static/app.js") == (
            static_dir / "static" / "app.js"
        ).resolve()

    def test__resolve_static_file__unknown_path_falls_back_to_index(
        self, static_dir: Path,
    ) -> None:
        assert resolve_static_file(static_dir, "dashboard/settings") == (
            static_dir / "index.html"
        ).resolve()

    def test__resolve_static_file__traversal_falls_back_to_index(
        self, static_dir: Path,
    ) -> None:
        assert resolve_static_file(static_dir, "../../etc/passwd") == (
            static_dir / "index.html"
        ).resolve()

    def test__resolve_static_file__missing_build_returns_none(self, tmp_path: Path) -> None:
        assert resolve_static_file(tmp_path / "missing", "") is None


async def test_client_route_serves_index(client: AsyncClient, serve_static: Path) -> None:
    response = await client.get("/dashboard")

    assert response.status_code == 200
    assert "dashboard" in response.text


async def test_static_asset_is_served(client: AsyncClient, serve_static: Path) -> None:
    response = await client.get("/static/app.js")

    assert response.status_code == 200
    assert "console.log" in response.text


async def test_unknown_api_path_is_not_swallowed(
    client: AsyncClient, serve_static: Path,
) -> None:
    response = await client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}


async def test_missing_build_returns_404(client: AsyncClient) -> None:
    response = await client.get("/dashboard")

    assert response.status_code == 404
