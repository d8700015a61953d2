"""Serves the prebuilt single-page application for every non-API path."""
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from api.dependencies import get_settings
from core.config import Settings

router = APIRouter(tags=["spa"], include_in_schema=False)


def resolve_static_file(static_dir: Path, path: str) -> Path | None:
    """
    Map a request path to a file inside static_dir.

    Existing files are served directly; any other path falls back to
    index.html so client-side routing works. Paths escaping static_dir are
    treated as unknown.
    """
    root = static_dir.resolve()
    index = root / "index.html"
    if path:
        candidate = (root / path).resolve()
        if candidate.is_relative_to(root) and candidate.is_file():
            return candidate
    return index if index.is_file() else None


@router.get("/{full_path:path}")
async def serve_spa(
    full_path: str,
    settings: Settings = Depends(get_settings),
) -> FileResponse:
    """Serve a static asset or the SPA shell."""
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not Found")

    file_path = resolve_static_file(Path(settings.static_dir), full_path)
    if file_path is None:
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(file_path)
