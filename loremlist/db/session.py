"""Session Setup - per-connection configuration shared by every engine.

Invariants:
    - SQLite connections always run with foreign keys enforced, so ON DELETE CASCADE
      behaves as it does on PostgreSQL

Design Decisions:
    - Separate from infrastructure/database.py: test fixtures build their own
      engine without the pooling configuration
"""

from sqlalchemy import Engine, event


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on FK enforcement for every new SQLite connection of engine."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

