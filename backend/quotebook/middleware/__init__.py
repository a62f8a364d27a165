"""
QuoteBook Backend — Middleware Package
========================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

The request id is set before the access logger runs so every access line
carries it.
"""
