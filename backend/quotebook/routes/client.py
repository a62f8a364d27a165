"""
QuoteBook Backend — Production Client Routes
==============================================

What:  Serves the built front-end from the same process in production.
How:   GET / returns <CLIENT_BUILD_DIR>/index.html untouched; the build's
       static/ folder (JS, CSS, images) is mounted at /static.
When:  Only registered when CLIENT_BUILD_DIR is set. In development the
       client runs on its own dev server and talks to the API through CORS.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

logger = logging.getLogger(__name__)


def mount_client(app: FastAPI, build_dir: str) -> None:
    """
    Attach the index route and static assets of a client build to `app`.

    Raises:
        FileNotFoundError: build_dir has no index.html (a missing build is a
            deployment mistake, so startup fails loudly).
    """
    root = Path(build_dir).resolve()
    index_file = root / "index.html"
    if not index_file.is_file():
        raise FileNotFoundError(f"Client build has no index.html: {index_file}")

    router = APIRouter(tags=["Client"])

    @router.get("/", include_in_schema=False)
    async def client_index() -> FileResponse:
        return FileResponse(path=str(index_file), media_type="text/html")

    app.include_router(router)

    static_dir = root / "static"
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    logger.info("Serving client build from %s", root)
