"""Catch-all GET — serves the bundled single-page frontend."""
from pathlib import Path
from fastapi import APIRouter
from fastapi.responses import FileResponse, JSONResponse

from config import settings

router = APIRouter()


def _static_root() -> Path:
    return Path(settings.STATIC_DIR).resolve()


@router.get("/{full_path:path}", include_in_schema=False)
def serve_frontend(full_path: str):
    if full_path == "api" or full_path.startswith("api/"):
        return JSONResponse(status_code=404, content={"error": "Not found"})

    root = _static_root()
    candidate = (root / full_path).resolve()
    if full_path and candidate.is_file() and candidate.is_relative_to(root):
        return FileResponse(candidate)

    index = root / "index.html"
    if not index.is_file():
        return JSONResponse(status_code=404, content={"error": "Frontend not built"})
    return FileResponse(index)
