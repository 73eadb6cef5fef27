"""Infrastructure Layer — database access, persistence gateway and logging.

Invariants:
    - Infrastructure implements core protocols; core never imports from here
    - All SQLAlchemy errors are mapped to DatabaseError before leaving this layer

Design Decisions:
    - Gateway constructed once per app and injected (no module-level singleton)
"""
