"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies) before any persistence
    - Server-managed fields (added_by, updated_by, timestamps) are never accepted from clients

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
