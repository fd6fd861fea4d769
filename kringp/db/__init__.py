"""Database Infrastructure — SQLAlchemy Base and shared column helpers.

Invariants:
    - Single async engine per process (initialized via init_db)
    - asyncpg for PostgreSQL; aiosqlite for local runs and tests
"""
