"""
QuoteBook Backend — Quote Store (Persistence Primitives)
==========================================================

What:  The authoritative set of quotes plus lookup/mutation primitives.
How:   QuoteStore is an abstract interface with two implementations:

       SqlQuoteStore     one per request, wraps an AsyncSession
       MemoryQuoteStore  one per process, a dict guarded by an asyncio.Lock

Contract shared by both:
    list_all()            → every record, insertion (ascending id) order
    find_by_id(id)        → the record, or QuoteNotFoundError
    insert(fields)        → the stored record with a fresh unique id
    update(id, fields)    → the merged record, or QuoteNotFoundError
    delete(id)            → the remaining records, or QuoteNotFoundError

Records go in as plain field dicts and come out as QuoteRecord schemas, so
callers never hold an ORM instance bound to a session.

Stores raise QuoteNotFoundError for a missing id and let every other
failure propagate untouched; QuoteService decides what it means.
"""

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from quotebook.config import settings
from quotebook.database import session_scope
from quotebook.exceptions import QuoteNotFoundError
from quotebook.models.quote import MAX_QUOTE_ID, Quote
from quotebook.schemas.quote import QUOTE_FIELDS, QuoteRecord

logger = logging.getLogger(__name__)


def _content_fields(fields: Dict[str, str]) -> Dict[str, str]:
    # Only the three content fields are writable; "id" belongs to the store
    return {name: value for name, value in fields.items() if name in QUOTE_FIELDS}


class QuoteStore(ABC):
    """Abstract quote storage. See the module docstring for the contract."""

    @abstractmethod
    async def list_all(self) -> List[QuoteRecord]:
        ...

    @abstractmethod
    async def find_by_id(self, quote_id: int) -> QuoteRecord:
        ...

    @abstractmethod
    async def insert(self, fields: Dict[str, str]) -> QuoteRecord:
        ...

    @abstractmethod
    async def update(self, quote_id: int, fields: Dict[str, str]) -> QuoteRecord:
        ...

    @abstractmethod
    async def delete(self, quote_id: int) -> List[QuoteRecord]:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """True when the backing storage answers. Never raises."""
        ...


# ══════════════════════════════════════════════════════════════════════════
# SQLAlchemy Store
# ══════════════════════════════════════════════════════════════════════════


class SqlQuoteStore(QuoteStore):
    """
    Quote store backed by the `quotes` table.

    Writes are flushed, not committed: the surrounding session_scope commits
    once the whole request succeeded, or rolls everything back.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get(self, quote_id: int) -> Quote:
        # Out-of-range ids would make the driver raise, not miss
        if not 1 <= quote_id <= MAX_QUOTE_ID:
            raise QuoteNotFoundError(quote_id)
        quote = await self.session.get(Quote, quote_id)
        if quote is None:
            raise QuoteNotFoundError(quote_id)
        return quote

    async def list_all(self) -> List[QuoteRecord]:
        result = await self.session.execute(select(Quote).order_by(Quote.id))
        return [QuoteRecord.model_validate(q) for q in result.scalars().all()]

    async def find_by_id(self, quote_id: int) -> QuoteRecord:
        return QuoteRecord.model_validate(await self._get(quote_id))

    async def insert(self, fields: Dict[str, str]) -> QuoteRecord:
        quote = Quote(**_content_fields(fields))
        self.session.add(quote)
        await self.session.flush()  # assigns the autoincrement id
        logger.debug("Inserted quote %s", quote.id)
        return QuoteRecord.model_validate(quote)

    async def update(self, quote_id: int, fields: Dict[str, str]) -> QuoteRecord:
        quote = await self._get(quote_id)
        for name, value in _content_fields(fields).items():
            setattr(quote, name, value)
        await self.session.flush()
        return QuoteRecord.model_validate(quote)

    async def delete(self, quote_id: int) -> List[QuoteRecord]:
        quote = await self._get(quote_id)
        await self.session.delete(quote)
        await self.session.flush()
        return await self.list_all()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Quote.id)))
        return result.scalar() or 0

    async def ping(self) -> bool:
        try:
            await self.session.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Quote database unreachable: %s", str(e))
            # Leave the session clean so session_scope can still commit
            await self.session.rollback()
            return False
        return True


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Store
# ══════════════════════════════════════════════════════════════════════════


class MemoryQuoteStore(QuoteStore):
    """
    Quote store held in process memory.

    Every operation runs under one asyncio.Lock, so concurrent requests on
    the event loop can never interleave an id allocation. Ids come from a
    counter and are never reused, even after the highest id is deleted.
    """

    def __init__(self):
        self._quotes: Dict[int, QuoteRecord] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    def _get(self, quote_id: int) -> QuoteRecord:
        try:
            return self._quotes[quote_id]
        except KeyError:
            raise QuoteNotFoundError(quote_id) from None

    async def list_all(self) -> List[QuoteRecord]:
        async with self._lock:
            return list(self._quotes.values())

    async def find_by_id(self, quote_id: int) -> QuoteRecord:
        async with self._lock:
            return self._get(quote_id)

    async def insert(self, fields: Dict[str, str]) -> QuoteRecord:
        async with self._lock:
            record = QuoteRecord(id=next(self._ids), **_content_fields(fields))
            self._quotes[record.id] = record
            return record

    async def update(self, quote_id: int, fields: Dict[str, str]) -> QuoteRecord:
        async with self._lock:
            record = self._get(quote_id).model_copy(update=_content_fields(fields))
            self._quotes[quote_id] = record
            return record

    async def delete(self, quote_id: int) -> List[QuoteRecord]:
        async with self._lock:
            self._get(quote_id)
            del self._quotes[quote_id]
            return list(self._quotes.values())

    async def count(self) -> int:
        async with self._lock:
            return len(self._quotes)

    async def ping(self) -> bool:
        return True


# ── Singleton & Dependency ────────────────────────────────────────────────
# The memory store must outlive requests; the SQL store lives per session.
memory_quote_store = MemoryQuoteStore()


@asynccontextmanager
async def open_store() -> AsyncGenerator[QuoteStore, None]:
    """
    Open the configured store for one unit of work.

    For the database backend the session is committed when the block exits
    cleanly and rolled back if it raised.
    """
    if settings.store_backend == "memory":
        yield memory_quote_store
        return

    async with session_scope() as session:
        yield SqlQuoteStore(session)


async def get_quote_store() -> AsyncGenerator[QuoteStore, None]:
    """FastAPI dependency: one store per request."""
    async with open_store() as store:
        yield store
