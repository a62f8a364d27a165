"""
QuoteBook Backend — Quote Service Unit Tests
==============================================

What:  Tests for QuoteService envelopes and error classification.
How:   Uses a mock store (AsyncMock) so every failure mode can be forced.

What we test:
    ✅ Each operation answers with its message and the right quotes_data
    ✅ QuoteNotFoundError propagates unchanged
    ✅ Any other store failure becomes StoreError
    ✅ An update with no fields is rejected before the store is touched
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from quotebook.exceptions import QuoteNotFoundError, QuoteValidationError, StoreError
from quotebook.schemas.quote import QuoteCreate, QuoteRecord, QuoteUpdate
from quotebook.services.quote_service import QuoteService

ADA = QuoteRecord(id=1, author="Ada", content="Hello", category="tech")
GRACE = QuoteRecord(id=2, author="Grace", content="Ship it", category="tech")


@pytest.fixture
def mock_store():
    store = MagicMock()
    store.list_all = AsyncMock(return_value=[ADA, GRACE])
    store.find_by_id = AsyncMock(return_value=ADA)
    store.insert = AsyncMock(return_value=GRACE)
    store.update = AsyncMock(return_value=ADA)
    store.delete = AsyncMock(return_value=[GRACE])
    return store


class TestQuoteServiceEnvelopes:

    def setup_method(self):
        self.service = QuoteService()

    @pytest.mark.asyncio
    async def test_index(self, mock_store):
        result = await self.service.index(mock_store)
        assert result.message == "ok"
        assert result.quotes_data == [ADA, GRACE]

    @pytest.mark.asyncio
    async def test_show_returns_single_record(self, mock_store):
        result = await self.service.show(mock_store, 1)
        assert result.message == "ok"
        assert result.quotes_data == ADA
        mock_store.find_by_id.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_create_returns_full_list(self, mock_store):
        payload = QuoteCreate(author="Grace", content="Ship it", category="tech")

        result = await self.service.create(mock_store, payload)

        assert result.message == "created"
        assert result.quotes_data == [ADA, GRACE]
        mock_store.insert.assert_awaited_once_with(
            {"author": "Grace", "content": "Ship it", "category": "tech"}
        )

    @pytest.mark.asyncio
    async def test_update_passes_only_sent_fields(self, mock_store):
        payload = QuoteUpdate.model_validate({"content": "Bye"})

        result = await self.service.update(mock_store, 1, payload)

        assert result.message == "updated"
        assert result.quotes_data == [ADA, GRACE]
        mock_store.update.assert_awaited_once_with(1, {"content": "Bye"})

    @pytest.mark.asyncio
    async def test_delete_returns_remaining(self, mock_store):
        result = await self.service.delete(mock_store, 1)
        assert result.message == "deleted"
        assert result.quotes_data == [GRACE]


class TestQuoteServiceErrors:

    def setup_method(self):
        self.service = QuoteService()

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, mock_store):
        mock_store.find_by_id.side_effect = QuoteNotFoundError(7)

        with pytest.raises(QuoteNotFoundError) as exc_info:
            await self.service.show(mock_store, 7)
        assert exc_info.value.quote_id == 7

    @pytest.mark.asyncio
    async def test_unexpected_failure_becomes_store_error(self, mock_store):
        mock_store.list_all.side_effect = RuntimeError("connection reset")

        with pytest.raises(StoreError) as exc_info:
            await self.service.index(mock_store)

        assert exc_info.value.message == "there was some other error"
        assert exc_info.value.context["operation"] == "index"
        assert exc_info.value.context["error_type"] == "RuntimeError"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_delete_failure_keeps_quote_id_in_context(self, mock_store):
        mock_store.delete.side_effect = OSError("disk full")

        with pytest.raises(StoreError) as exc_info:
            await self.service.delete(mock_store, 3)
        assert exc_info.value.context["quote_id"] == 3

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, mock_store):
        # model_construct skips the validator that normally blocks this
        payload = QuoteUpdate.model_construct()

        with pytest.raises(QuoteValidationError):
            await self.service.update(mock_store, 1, payload)
        mock_store.update.assert_not_awaited()
