"""
QuoteBook Backend — Quote Service (Envelope & Error Mapping)
==============================================================

What:  Turns store operations into the API's response envelope.
How:   Each operation runs one store call (or two) inside _store_errors(),
       the single place where failures are classified:

           QuoteNotFoundError  → propagates → 404 "no quote matches that ID"
           QuoteBookError      → propagates → its own handler
           anything else       → StoreError → 500 "there was some other error"

Who:   Called by the quote route handlers with the request's QuoteStore.

Response messages:
    index / show  → "ok"
    create        → "created"
    update        → "updated"
    delete        → "deleted"

Writes answer with the full list so the client can re-render in one step.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from quotebook.exceptions import QuoteBookError, QuoteValidationError, StoreError
from quotebook.schemas.quote import QuoteCreate, QuoteEnvelope, QuoteUpdate
from quotebook.services.quote_store import QuoteStore

logger = logging.getLogger(__name__)


class QuoteService:
    """Stateless; the store is passed in per call."""

    # ── Error Mapping Boundary ────────────────────────────────────────────
    # The only place a raw store exception becomes StoreError. Handlers and
    # routes never see driver exceptions, so SQL text cannot leak to clients.
    @contextmanager
    def _store_errors(self, operation: str, **context) -> Iterator[None]:
        try:
            yield
        except QuoteBookError:
            raise
        except Exception as e:
            logger.error(
                "Store failure during %s %s: %s",
                operation,
                context,
                str(e),
                exc_info=True,
            )
            raise StoreError(
                context={"operation": operation, "error_type": type(e).__name__, **context}
            ) from e

    async def index(self, store: QuoteStore) -> QuoteEnvelope:
        with self._store_errors("index"):
            quotes = await store.list_all()
        return QuoteEnvelope(message="ok", quotes_data=quotes)

    async def show(self, store: QuoteStore, quote_id: int) -> QuoteEnvelope:
        with self._store_errors("show", quote_id=quote_id):
            quote = await store.find_by_id(quote_id)
        return QuoteEnvelope(message="ok", quotes_data=quote)

    async def create(self, store: QuoteStore, payload: QuoteCreate) -> QuoteEnvelope:
        # Insert and re-list share one session, so the list includes the new row
        with self._store_errors("create"):
            created = await store.insert(payload.model_dump())
            quotes = await store.list_all()
        logger.info("Created quote %s", created.id)
        return QuoteEnvelope(message="created", quotes_data=quotes)

    async def update(
        self, store: QuoteStore, quote_id: int, payload: QuoteUpdate
    ) -> QuoteEnvelope:
        changes = payload.changes()
        if not changes:
            # QuoteUpdate already rejects this; guards direct callers
            raise QuoteValidationError(
                errors=[{"field": "body", "message": "no quote fields supplied"}]
            )
        with self._store_errors("update", quote_id=quote_id):
            await store.update(quote_id, changes)
            quotes = await store.list_all()
        logger.info("Updated quote %s (%s)", quote_id, ", ".join(sorted(changes)))
        return QuoteEnvelope(message="updated", quotes_data=quotes)

    async def delete(self, store: QuoteStore, quote_id: int) -> QuoteEnvelope:
        with self._store_errors("delete", quote_id=quote_id):
            remaining = await store.delete(quote_id)
        logger.info("Deleted quote %s", quote_id)
        return QuoteEnvelope(message="deleted", quotes_data=remaining)


# ── Singleton Instance ────────────────────────────────────────────────────
quote_service = QuoteService()
