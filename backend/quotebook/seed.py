"""
QuoteBook Backend — Fixture Seeding
=====================================

What:  Fills an empty store with starter quotes at startup.
How:   Uses the built-in DEFAULT_QUOTES, or a JSON file named by SEED_FILE:

           [
               {"author": "Ada Lovelace", "content": "...", "category": "tech"},
               ...
           ]

       Seeding is skipped entirely when the store already holds quotes, so a
       restart never duplicates the fixtures.
"""

import json
import logging
from typing import List, Optional, Sequence

import aiofiles
from pydantic import ValidationError

from quotebook.exceptions import QuoteValidationError
from quotebook.schemas.quote import QuoteCreate
from quotebook.services.quote_store import QuoteStore

logger = logging.getLogger(__name__)

DEFAULT_QUOTES: List[QuoteCreate] = [
    QuoteCreate(
        author="Ada Lovelace",
        content="The more I study, the more insatiable do I feel my genius for it to be.",
        category="science",
    ),
    QuoteCreate(
        author="Grace Hopper",
        content="The most dangerous phrase in the language is, 'We've always done it this way.'",
        category="tech",
    ),
    QuoteCreate(
        author="Maya Angelou",
        content="Nothing will work unless you do.",
        category="motivation",
    ),
    QuoteCreate(
        author="Alan Kay",
        content="The best way to predict the future is to invent it.",
        category="tech",
    ),
    QuoteCreate(
        author="Marie Curie",
        content="Nothing in life is to be feared, it is only to be understood.",
        category="science",
    ),
]


async def load_seed_file(path: str) -> List[QuoteCreate]:
    """
    Read and validate a JSON seed file.

    Raises:
        QuoteValidationError: the file is not a JSON array, or an entry is
            not a valid quote. Field names are prefixed with the entry index
            ("2.author") so the bad line is easy to find.
        OSError: the file cannot be read.
    """
    async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
        raw = await f.read()

    try:
        entries = json.loads(raw)
    except json.JSONDecodeError as e:
        raise QuoteValidationError(
            errors=[{"field": "seed_file", "message": f"invalid JSON: {e.msg}"}],
            context={"path": path},
        ) from e

    if not isinstance(entries, list):
        raise QuoteValidationError(
            errors=[{"field": "seed_file", "message": "expected a JSON array of quotes"}],
            context={"path": path},
        )

    quotes: List[QuoteCreate] = []
    errors = []
    for index, entry in enumerate(entries):
        try:
            quotes.append(QuoteCreate.model_validate(entry))
        except ValidationError as e:
            for err in e.errors():
                field = ".".join(str(part) for part in err["loc"]) or "entry"
                errors.append({"field": f"{index}.{field}", "message": err["msg"]})

    if errors:
        raise QuoteValidationError(errors=errors, context={"path": path})

    logger.info("Loaded %d seed quotes from %s", len(quotes), path)
    return quotes


async def seed_quotes(
    store: QuoteStore, quotes: Optional[Sequence[QuoteCreate]] = None
) -> int:
    """
    Insert fixtures into an empty store.

    Returns:
        Number of quotes inserted (0 when the store was not empty).
    """
    fixtures = DEFAULT_QUOTES if quotes is None else quotes

    existing = await store.count()
    if existing:
        logger.info("Store already holds %d quotes; skipping seed", existing)
        return 0

    for quote in fixtures:
        await store.insert(quote.model_dump())

    logger.info("Seeded %d quotes", len(fixtures))
    return len(fixtures)
