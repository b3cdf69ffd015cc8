"""API Layer — FastAPI routes, auth dependency, envelopes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint answers with the {status, message, data} envelope

Design Decisions:
    - Thin routes: validate, delegate to services/, format the envelope
"""
