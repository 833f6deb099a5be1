"""Database Session Manager - connection pool, health check and unit of work.

Invariants:
    - Every unit of work commits on clean exit and rolls back on exception
      (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - A failing commit surfaces as StorageFailure (infrastructure/storage_errors.py)

Design Decisions:
    - Singleton db_manager initialized on startup by the composition root
      (no global import side effects)
    - expire_on_commit=False: entities are converted before commit, but ORM rows stay
      readable after it
"""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from loremlist.db.session import enable_sqlite_foreign_keys
from loremlist.infrastructure.sql_repositories import (
    SqlAssociationStore, SqlItemStore, SqlListStore,
)
from loremlist.infrastructure.storage_errors import storage_errors

logger = logging.getLogger(__name__)


class SqlUnitOfWork:
    """One session, one transaction, three stores."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory
        self.session: Session | None = None

    def __enter__(self) -> "SqlUnitOfWork":
        self.session = self._session_factory()
        self.lists = SqlListStore(self.session)
        self.items = SqlItemStore(self.session)
        self.associations = SqlAssociationStore(self.session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                with storage_errors("commit"):
                    self.session.commit()
            else:
                self.session.rollback()
        finally:
            self.session.close()


class DatabaseSessionManager:
    """Manages database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_engine(database_url, **engine_kwargs)
        enable_sqlite_foreign_keys(self.engine)
        self._session_factory = sessionmaker(
            self.engine, class_=Session, expire_on_commit=False,
        )

    def unit_of_work(self) -> SqlUnitOfWork:
        return SqlUnitOfWork(self._session_factory)

    def health_check(self) -> bool:
        """Check database connectivity (for readiness checks)."""
        try:
            with self._session_factory() as db:
                db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("DB health check failed: %s", e)
            return False

    def dispose(self) -> None:
        self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager
