"""Pydantic Schemas — request validation for API write endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, direct service callers)
    - JSON field names are camelCase aliases; Python attributes are snake_case

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
