"""
QuoteBook Backend — Quote Route Handlers
==========================================

What:  Maps the REST routes onto QuoteService.

    GET          /quotes        → index
    GET          /quotes/{id}   → show
    POST         /quotes        → create (201)
    PUT | PATCH  /quotes/{id}   → update
    DELETE       /quotes/{id}   → delete

How:   FastAPI validates the body against QuoteCreate/QuoteUpdate before the
       handler runs; a failure never reaches the store and is answered 422
       by the RequestValidationError handler in main.py. Path ids are bounded
       to 1..MAX_QUOTE_ID; an id outside that range (or not an integer at
       all) fails path validation and is answered 404. Everything else is
       delegated to the service; handlers stay free of try/except.
"""

from fastapi import APIRouter, Depends, Path

from quotebook.models.quote import MAX_QUOTE_ID
from quotebook.schemas.quote import (
    ErrorEnvelope,
    QuoteCreate,
    QuoteEnvelope,
    QuoteUpdate,
)
from quotebook.services.quote_service import quote_service
from quotebook.services.quote_store import QuoteStore, get_quote_store

router = APIRouter(prefix="/quotes", tags=["Quotes"])

NOT_FOUND = {"description": "No quote has that id", "model": ErrorEnvelope}
INVALID = {"description": "Malformed quote payload", "model": ErrorEnvelope}
SERVER_ERROR = {"description": "Unexpected store failure", "model": ErrorEnvelope}


@router.get(
    "",
    response_model=QuoteEnvelope,
    responses={500: SERVER_ERROR},
    summary="List every quote",
)
async def index(store: QuoteStore = Depends(get_quote_store)) -> QuoteEnvelope:
    return await quote_service.index(store)


@router.get(
    "/{quote_id}",
    response_model=QuoteEnvelope,
    responses={404: NOT_FOUND, 500: SERVER_ERROR},
    summary="Fetch one quote",
)
async def show(
    quote_id: int = Path(ge=1, le=MAX_QUOTE_ID, description="Quote id"),
    store: QuoteStore = Depends(get_quote_store),
) -> QuoteEnvelope:
    return await quote_service.show(store, quote_id)


@router.post(
    "",
    status_code=201,
    response_model=QuoteEnvelope,
    responses={422: INVALID, 500: SERVER_ERROR},
    summary="Create a quote",
    description="Returns every quote, including the new one, so the client can re-render.",
)
async def create(
    payload: QuoteCreate, store: QuoteStore = Depends(get_quote_store)
) -> QuoteEnvelope:
    return await quote_service.create(store, payload)


@router.api_route(
    "/{quote_id}",
    methods=["PUT", "PATCH"],
    response_model=QuoteEnvelope,
    responses={404: NOT_FOUND, 422: INVALID, 500: SERVER_ERROR},
    summary="Update some or all fields of a quote",
)
async def update(
    payload: QuoteUpdate,
    quote_id: int = Path(ge=1, le=MAX_QUOTE_ID, description="Quote id"),
    store: QuoteStore = Depends(get_quote_store),
) -> QuoteEnvelope:
    return await quote_service.update(store, quote_id, payload)


@router.delete(
    "/{quote_id}",
    response_model=QuoteEnvelope,
    responses={404: NOT_FOUND, 500: SERVER_ERROR},
    summary="Delete a quote",
    description="Returns the quotes that remain.",
)
async def delete(
    quote_id: int = Path(ge=1, le=MAX_QUOTE_ID, description="Quote id"),
    store: QuoteStore = Depends(get_quote_store),
) -> QuoteEnvelope:
    return await quote_service.delete(store, quote_id)
