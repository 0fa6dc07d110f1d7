"""API Layer — FastAPI wiring, error handlers and demo routes.

Invariants:
    - The signal handler is registered explicitly, never discovered
    - All error envelopes are structured JSON
"""
