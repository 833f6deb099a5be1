"""Database Infrastructure - sync session factory and SQLAlchemy Base.

Invariants:
    - All sessions are sync (sqlalchemy.orm.Session)
    - SQLite engines enforce foreign keys

Design Decisions:
    - psycopg 3 driver for PostgreSQL
"""
