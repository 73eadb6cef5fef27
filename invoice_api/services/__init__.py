"""Services Layer — customer and invoice use cases over the persistence gateway.

Invariants:
    - Services depend on the PersistenceGateway protocol, never on SQLAlchemy
    - Validation runs before any gateway call on writes
    - Domain failures raised as core/errors.py types with specific messages

Design Decisions:
    - One service class per entity for locality
"""
