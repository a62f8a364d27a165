"""
QuoteBook Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Who:   uvicorn (`uvicorn quotebook.main:app`) or the `quotebook` console
       script started by the process supervisor.

Lifecycle:
    Startup:
    1. Configure logging
    2. Create missing tables (database backend, retried while the DB boots)
    3. Seed fixture quotes into an empty store
    Shutdown:
    1. Dispose the database engine

Error envelopes (quotes_data omitted):
    QuoteNotFoundError      → 404 {"message": "no quote matches that ID"}
    invalid path id         → 404 {"message": "no quote matches that ID"}
    invalid body            → 422 {"message": "invalid quote payload", "errors": [...]}
    StoreError / anything   → 500 {"message": "there was some other error"}
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from quotebook import __version__
from quotebook.config import settings
from quotebook.database import dispose_engine, init_models
from quotebook.exceptions import (
    INVALID_PAYLOAD_MESSAGE,
    NOT_FOUND_MESSAGE,
    OTHER_ERROR_MESSAGE,
    QuoteNotFoundError,
    QuoteValidationError,
    StoreError,
)
from quotebook.middleware.logging import RequestLoggingMiddleware
from quotebook.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from quotebook.routes import health, quotes
from quotebook.routes.client import mount_client
from quotebook.seed import load_seed_file, seed_quotes
from quotebook.services.quote_store import open_store

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output goes to stdout so containers and supervisors capture it.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # quotebook.access already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

async def seed_store() -> int:
    """Seed the configured store from SEED_FILE or the built-in fixtures."""
    fixtures = await load_seed_file(settings.seed_file) if settings.seed_file else None
    async with open_store() as store:
        return await seed_quotes(store, fixtures)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("QuoteBook backend %s starting (store=%s)", __version__, settings.store_backend)

    if settings.store_backend == "database":
        await init_models()

    if settings.seed_on_startup:
        await seed_store()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("QuoteBook backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def field_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten FastAPI/pydantic error dicts into {"field", "message"} pairs.

    ("body", "author") → "author"; ("body",) → "body" (the body as a whole).
    """
    flattened = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if err.get("type") == "json_invalid" or len(loc) < 2:
            # Unparseable JSON reports a character offset, not a field
            field = "body"
        else:
            field = ".".join(loc[1:])
        flattened.append({"field": field, "message": err.get("msg", "invalid value")})
    return flattened


def _not_found_response() -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": NOT_FOUND_MESSAGE})


def _other_error_response() -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": OTHER_ERROR_MESSAGE})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the error envelopes listed in the module docstring.

    Internal details (exception text, SQL, context) are logged only.
    """

    @app.exception_handler(QuoteNotFoundError)
    async def handle_not_found(request: Request, exc: QuoteNotFoundError):
        return _not_found_response()

    @app.exception_handler(QuoteValidationError)
    async def handle_quote_validation(request: Request, exc: QuoteValidationError):
        logger.warning("[%s] Invalid quote payload: %s", request_id_var.get(""), exc.errors)
        return JSONResponse(
            status_code=422,
            content={"message": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        # A non-integer id can match no quote
        if any(err.get("loc", ("",))[0] == "path" for err in errors):
            return _not_found_response()

        flattened = field_errors(errors)
        logger.warning("[%s] Invalid quote payload: %s", request_id_var.get(""), flattened)
        return JSONResponse(
            status_code=422,
            content={"message": INVALID_PAYLOAD_MESSAGE, "errors": flattened},
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error("[%s] Store error | Context: %s", request_id_var.get(""), exc.context)
        return _other_error_response()

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs outside the middleware stack, so the id comes from request.state
        rid = getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        response = _other_error_response()
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="QuoteBook API",
        description="CRUD API for quotes, answering every call with a {message, quotes_data} envelope.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: RequestID → Logging → GZip → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(quotes.router)
    app.include_router(health.router)

    if settings.client_build_dir:
        mount_client(app, settings.client_build_dir)

    return app


app = create_app()


def run() -> None:
    """Console entry point: `quotebook` starts uvicorn with the configured host/port."""
    import uvicorn

    uvicorn.run(
        "quotebook.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
