"""
QuoteBook Backend — Pydantic Request/Response Schemas
=======================================================

What:  The API contract between the front-end client and the backend.
How:   FastAPI validates request bodies against the *Create/*Update models
       before a handler runs, so the store never sees a malformed payload.
       Responses are wrapped in the fixed envelope:

           { "message": "ok", "quotes_data": [...] }

Validation policy:
    - Field values must already be JSON strings; numbers, booleans, objects
      and null are rejected rather than coerced.
    - Strings are kept verbatim (no trimming, no case folding).
    - Unknown keys are ignored.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from quotebook.models.quote import AUTHOR_MAX_LENGTH, CATEGORY_MAX_LENGTH

QUOTE_FIELDS = ("author", "content", "category")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class QuoteCreate(BaseModel):
    """Body of POST /quotes. All three fields are required."""

    author: str = Field(max_length=AUTHOR_MAX_LENGTH, description="Who said it")
    content: str = Field(description="The quote itself")
    category: str = Field(max_length=CATEGORY_MAX_LENGTH, description="Grouping label")


class QuoteUpdate(BaseModel):
    """
    Body of PUT/PATCH /quotes/{id}.

    Any subset of the fields may be sent; only the ones present are written.
    An explicit null is an error, and so is a body naming none of the fields.
    """

    author: Optional[str] = Field(default=None, max_length=AUTHOR_MAX_LENGTH)
    content: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX_LENGTH)

    @field_validator(*QUOTE_FIELDS, mode="before")
    @classmethod
    def reject_null(cls, v):
        # Only runs for keys actually present in the body
        if v is None:
            raise ValueError("may not be null")
        return v

    @model_validator(mode="after")
    def require_some_field(self) -> "QuoteUpdate":
        if not self.model_fields_set.intersection(QUOTE_FIELDS):
            raise ValueError("supply at least one of: author, content, category")
        return self

    def changes(self) -> Dict[str, str]:
        """The fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class QuoteRecord(BaseModel):
    """A stored quote as it crosses the store boundary and leaves the API."""

    id: int = Field(description="Store-assigned identifier, never changes")
    author: str
    content: str
    category: str

    model_config = {"from_attributes": True}


class QuoteEnvelope(BaseModel):
    """
    The one response shape every quote endpoint returns on success.

    quotes_data is a single quote for show, and the full list for every
    other operation (the client re-renders the whole list after a write).
    """

    message: str = Field(description="ok, created, updated or deleted")
    quotes_data: Optional[Union[List[QuoteRecord], QuoteRecord]] = Field(default=None)


class FieldError(BaseModel):
    field: str
    message: str


class ErrorEnvelope(BaseModel):
    """
    Failure shape: quotes_data is omitted.

    Example (422):
        {
            "message": "invalid quote payload",
            "errors": [{"field": "author", "message": "Input should be a valid string"}]
        }
    """

    message: str
    errors: Optional[List[FieldError]] = None


class HealthResponse(BaseModel):
    """Returned by GET /health for supervisors and load balancers."""

    status: str = Field(description="healthy or unhealthy")
    version: str
    store_backend: str = Field(description="database or memory")
    store: str = Field(description="connected or disconnected")
    uptime_seconds: float
