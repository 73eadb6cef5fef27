"""Database Infrastructure — declarative Base, session factory and demo seed.

Invariants:
    - Single async engine per process (owned by DatabaseSessionManager)
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite for local/test databases, asyncpg for PostgreSQL
"""
