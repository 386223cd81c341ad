"""
Blogsite Backend — Static Page Routes
======================================

What:  Serves the site's HTML pages and other files from the frontend directory.
Why:   The same process hosts the API and the pages that call it.
How:   Named pages map to fixed files; every other path is resolved inside
       STATIC_DIR and served only if it is a regular file that stays inside it.
Who:   Mounted in main.create_app() as the fallback for paths no API route owns.

Path rules (anything rejected gets the not-found page):
    /                        → index.html
    /projects, /pieces, /blog → projects.html, pieces.html, blog.html
    /api/...                 → rejected (unknown API path, any verb)
    trailing "/"             → rejected (no directory listings)
    ".." anywhere            → rejected
    /js/..., /img/...        → rejected (reserved segments)
    outside STATIC_DIR       → rejected

Not-found page: 404.html with status 404 when present, else "404 page not found".
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, PlainTextResponse
from starlette.responses import Response

from blogsite.config import settings
from blogsite.exceptions import FrontendNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], include_in_schema=False)

NAMED_PAGES = {
    "/projects": "projects.html",
    "/pieces": "pieces.html",
    "/blog": "blog.html",
}
RESERVED_SEGMENTS = {"js", "img"}
NOT_FOUND_PAGE = "404.html"


def get_frontend_dir() -> Path:
    """
    Dependency: the configured frontend directory.

    Raises:
        FrontendNotFoundError: STATIC_DIR does not exist or is not a directory.
    """
    frontend = Path(settings.static_dir)
    if not frontend.is_dir():
        raise FrontendNotFoundError(context={"static_dir": str(frontend)})
    return frontend


def resolve_static_path(frontend: Path, url_path: str) -> Optional[Path]:
    """
    Map a URL path to a file inside `frontend`, or None when it must not be served.
    """
    if url_path.startswith("/api/") or url_path.endswith("/"):
        return None

    relative = url_path[1:] if url_path.startswith("/") else url_path
    if not relative or ".." in relative:
        return None

    first_segment = relative.split("/", 1)[0]
    if first_segment in RESERVED_SEGMENTS:
        return None

    root = frontend.resolve()
    target = (frontend / relative).resolve()
    if not target.is_relative_to(root):
        return None
    if not target.is_file():
        return None
    return target


def not_found_response(frontend: Path) -> Response:
    page = frontend / NOT_FOUND_PAGE
    if page.is_file():
        return FileResponse(page, status_code=404, media_type="text/html; charset=utf-8")
    return PlainTextResponse("404 page not found\n", status_code=404)


def serve_file(frontend: Path, filename: str) -> Response:
    target = frontend / filename
    if not target.is_file():
        logger.warning("Page file missing: %s", target)
        return PlainTextResponse("404 page not found\n", status_code=404)
    return FileResponse(target)


@router.api_route("/", methods=["GET", "HEAD"])
async def index_page(frontend: Path = Depends(get_frontend_dir)) -> Response:
    return serve_file(frontend, "index.html")


@router.api_route("/projects", methods=["GET", "HEAD"])
async def projects_page(frontend: Path = Depends(get_frontend_dir)) -> Response:
    return serve_file(frontend, NAMED_PAGES["/projects"])


@router.api_route("/pieces", methods=["GET", "HEAD"])
async def pieces_page(frontend: Path = Depends(get_frontend_dir)) -> Response:
    return serve_file(frontend, NAMED_PAGES["/pieces"])


@router.api_route("/blog", methods=["GET", "HEAD"])
async def blog_page(frontend: Path = Depends(get_frontend_dir)) -> Response:
    return serve_file(frontend, NAMED_PAGES["/blog"])


@router.api_route(
    "/api/{api_path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"],
)
async def unknown_api_path(frontend: Path = Depends(get_frontend_dir)) -> Response:
    """Unknown API paths get the not-found page whatever the verb."""
    return not_found_response(frontend)


@router.api_route("/{file_path:path}", methods=["GET", "HEAD"])
async def static_file(
    request: Request,
    file_path: str,
    frontend: Path = Depends(get_frontend_dir),
) -> Response:
    """
    Any other file under the frontend directory.

    The raw URL path is checked (not `file_path`), so "/api/x" and "/x/" are
    recognised before the converter normalises anything.
    """
    target = resolve_static_path(frontend, request.url.path)
    if target is None:
        return not_found_response(frontend)
    return FileResponse(target)
