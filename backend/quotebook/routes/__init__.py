"""
QuoteBook Backend — Route Handlers
====================================

    quotes  REST CRUD over /quotes
    health  GET /health
    client  GET / + /static for a production client build (optional)

Handlers only deal with HTTP details; QuoteService does the work.
"""
