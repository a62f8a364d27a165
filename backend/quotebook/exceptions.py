"""
QuoteBook Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the quote API.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers in main.py turn them into JSON envelopes.

Exception Hierarchy:
    QuoteBookError (base)
    ├── QuoteNotFoundError    → 404 "no quote matches that ID"
    ├── QuoteValidationError  → 422 "invalid quote payload" (+ field errors)
    └── StoreError            → 500 "there was some other error"

The 404 / 500 split is the whole failure taxonomy of the API: a missing id is
the caller's problem, anything else is ours.
"""

from typing import Any, Dict, List, Optional

NOT_FOUND_MESSAGE = "no quote matches that ID"
OTHER_ERROR_MESSAGE = "there was some other error"
INVALID_PAYLOAD_MESSAGE = "invalid quote payload"


class QuoteBookError(Exception):
    """
    Base exception for all QuoteBook application errors.

    Attributes:
        message:  Client-facing description (safe to return in a response)
        context:  Debug details (logged, never returned)
    """

    def __init__(
        self,
        message: str = OTHER_ERROR_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class QuoteNotFoundError(QuoteBookError):
    """
    Raised by a store when the requested quote id is absent.

    HTTP: 404 Not Found
    """

    def __init__(self, quote_id: Any = None, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        if quote_id is not None:
            ctx["quote_id"] = quote_id
        super().__init__(message=NOT_FOUND_MESSAGE, context=ctx)
        self.quote_id = quote_id


class QuoteValidationError(QuoteBookError):
    """
    Raised when a quote payload is malformed.

    HTTP: 422 Unprocessable Entity

    `errors` is a list of {"field": ..., "message": ...} dicts, one per
    offending field, returned to the client as-is.
    """

    def __init__(
        self,
        errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=INVALID_PAYLOAD_MESSAGE, context=context)
        self.errors = errors or []


class StoreError(QuoteBookError):
    """
    Raised when a store operation fails for any reason other than a missing id.

    HTTP: 500 Internal Server Error

    The client always sees the generic message; the original exception type
    goes into `context` for the server log.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=OTHER_ERROR_MESSAGE, context=context)
