"""
QuoteBook Backend — Application Package Initializer
===================================================

What: Marks the `quotebook` directory as a Python package.
Who:  Imported by uvicorn (`quotebook.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs, paths, status codes
    ├─────────────────────────────────────┤
    │     QuoteService (envelopes)        │  ← {message, quotes_data} + error mapping
    ├─────────────────────────────────────┤
    │     QuoteStore (SQL or memory)      │  ← list / find / insert / update / delete
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Routes never touch the store directly; the service is the only place
    store failures are turned into the 404 / 500 split.
"""

__version__ = "1.0.0"
