"""
QuoteBook Backend — Services Layer
====================================

    QuoteStore (quote_store):     storage primitives, SQL or in-memory
    QuoteService (quote_service): envelopes and the 404/500 error split
"""
