"""Static front-end routes.

Serves files from the configured static root. Any other non-API GET path
falls back to ``index.html`` (single-page-app convention); unknown API
paths get the JSON 404 instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from content_generator.core.config import settings

router = APIRouter()

INDEX_FILE = "index.html"


def get_static_root() -> Path:
    """Directory the front-end is served from."""
    return settings.api.static_dir


StaticRootDep = Annotated[Path, Depends(get_static_root)]


@router.api_route(
    "/api/{api_path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def api_not_found(api_path: str) -> None:
    """Any method on an unknown API path is a JSON 404."""
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


@router.get("/", include_in_schema=False)
@router.get("/{full_path:path}", include_in_schema=False)
async def serve_frontend(static_root: StaticRootDep, full_path: str = "") -> FileResponse:
    """Serve a static asset, or the main page for unknown paths."""
    root = static_root.resolve()
    if full_path:
        candidate = (root / full_path).resolve()
        if candidate.is_relative_to(root) and candidate.is_file():
            return FileResponse(candidate)

    index = root / INDEX_FILE
    if not index.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Front-end not found")
    return FileResponse(index)
