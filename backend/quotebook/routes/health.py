"""
QuoteBook Backend — Health Check Route
========================================

What:  GET /health for process supervisors and load balancers.
How:   Pings the configured store with a trivial query.

Status:
    healthy    store reachable       → HTTP 200
    unhealthy  store unreachable     → HTTP 503 (stop routing traffic here)
"""

import time

from fastapi import APIRouter, Depends, Response

from quotebook import __version__
from quotebook.config import settings
from quotebook.schemas.quote import HealthResponse
from quotebook.services.quote_store import QuoteStore, get_quote_store

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response, store: QuoteStore = Depends(get_quote_store)
) -> HealthResponse:
    connected = await store.ping()
    if not connected:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        store_backend=settings.store_backend,
        store="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
