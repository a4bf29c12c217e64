"""
Legal Pages Router
Serves the static terms, privacy and mission pages from LEGAL_PAGES_DIR.
"""

import logging
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse

from app.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

LEGAL_PAGES = {
    "terms": ("terms.html", "Terms page"),
    "privacy": ("privacy.html", "Privacy page"),
    "mission": ("mission.html", "Mission page"),
}


def serve_page(name: str):
    filename, label = LEGAL_PAGES[name]
    page_path = Path(settings.legal_pages_dir) / filename

    if not page_path.is_file():
        logger.error(f"{filename} not found at: {page_path}")
        return PlainTextResponse(f"{label} not found", status_code=404)

    try:
        content = page_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Error serving {filename}: {e}")
        return PlainTextResponse(f"Error loading {label.lower()}", status_code=500)

    return HTMLResponse(content)


@router.get("/terms", include_in_schema=False)
async def terms():
    return serve_page("terms")


@router.get("/privacy", include_in_schema=False)
async def privacy():
    return serve_page("privacy")


@router.get("/mission", include_in_schema=False)
async def mission():
    return serve_page("mission")
