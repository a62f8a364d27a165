"""
QuoteBook Backend — Seeding Tests
===================================

What:  Tests for fixture loading, seeding and the startup lifespan.

What we test:
    ✅ Empty store receives the built-in fixtures
    ✅ Non-empty store is left alone
    ✅ Seed file parsing and its validation errors
    ✅ Lifespan seeds the memory store from SEED_FILE
"""

import json

import pytest
from fastapi import FastAPI

from quotebook import main
from quotebook.config import settings
from quotebook.exceptions import QuoteValidationError
from quotebook.seed import DEFAULT_QUOTES, load_seed_file, seed_quotes
from quotebook.services import quote_store
from quotebook.services.quote_store import MemoryQuoteStore


class TestSeedQuotes:

    @pytest.mark.asyncio
    async def test_seeds_empty_store(self, store):
        inserted = await seed_quotes(store)

        assert inserted == len(DEFAULT_QUOTES)
        authors = [q.author for q in await store.list_all()]
        assert authors == [q.author for q in DEFAULT_QUOTES]

    @pytest.mark.asyncio
    async def test_skips_non_empty_store(self, memory_store, ada_quote):
        await memory_store.insert(ada_quote)

        assert await seed_quotes(memory_store) == 0
        assert await memory_store.count() == 1


class TestLoadSeedFile:

    @pytest.mark.asyncio
    async def test_valid_file(self, tmp_path, ada_quote):
        path = tmp_path / "quotes.json"
        path.write_text(json.dumps([ada_quote]))

        quotes = await load_seed_file(str(path))

        assert len(quotes) == 1
        assert quotes[0].author == "Ada"

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path):
        path = tmp_path / "quotes.json"
        path.write_text("[{")

        with pytest.raises(QuoteValidationError) as exc_info:
            await load_seed_file(str(path))
        assert exc_info.value.errors[0]["field"] == "seed_file"

    @pytest.mark.asyncio
    async def test_not_an_array(self, tmp_path, ada_quote):
        path = tmp_path / "quotes.json"
        path.write_text(json.dumps(ada_quote))

        with pytest.raises(QuoteValidationError) as exc_info:
            await load_seed_file(str(path))
        assert exc_info.value.errors[0]["message"] == "expected a JSON array of quotes"

    @pytest.mark.asyncio
    async def test_bad_entry_names_its_index(self, tmp_path, ada_quote):
        path = tmp_path / "quotes.json"
        path.write_text(json.dumps([ada_quote, {"author": "Grace", "content": "Ship it"}]))

        with pytest.raises(QuoteValidationError) as exc_info:
            await load_seed_file(str(path))
        assert [e["field"] for e in exc_info.value.errors] == ["1.category"]

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            await load_seed_file(str(tmp_path / "nope.json"))


class TestLifespanSeeding:

    @pytest.mark.asyncio
    async def test_lifespan_seeds_from_file(self, tmp_path, ada_quote, monkeypatch):
        path = tmp_path / "quotes.json"
        path.write_text(json.dumps([ada_quote]))

        fresh_store = MemoryQuoteStore()
        monkeypatch.setattr(quote_store, "memory_quote_store", fresh_store)
        monkeypatch.setattr(settings, "store_backend", "memory")
        monkeypatch.setattr(settings, "seed_on_startup", True)
        monkeypatch.setattr(settings, "seed_file", str(path))
        # basicConfig(force=True) would strip pytest's capture handlers
        monkeypatch.setattr(main, "setup_logging", lambda: None)

        async with main.lifespan(FastAPI()):
            quotes = await fresh_store.list_all()

        assert [q.author for q in quotes] == ["Ada"]

    @pytest.mark.asyncio
    async def test_lifespan_without_seeding(self, monkeypatch):
        fresh_store = MemoryQuoteStore()
        monkeypatch.setattr(quote_store, "memory_quote_store", fresh_store)
        monkeypatch.setattr(settings, "store_backend", "memory")
        monkeypatch.setattr(settings, "seed_on_startup", False)
        monkeypatch.setattr(main, "setup_logging", lambda: None)

        async with main.lifespan(FastAPI()):
            assert await fresh_store.count() == 0
