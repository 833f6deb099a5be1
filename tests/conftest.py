"""Root conftest - shared test configuration and in-memory SQLite fixtures.

Invariants:
    - Every test that asks for a database gets a fresh in-memory SQLite schema
    - Foreign keys are enforced, so ON DELETE CASCADE behaves as on PostgreSQL

Design Decisions:
    - StaticPool: one connection shared by every session, so the in-memory
      database survives across units of work within a test
"""

import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from loremlist.db.base import Base  # noqa: E402
from loremlist.db.session import enable_sqlite_foreign_keys  # noqa: E402
from loremlist.infrastructure.database import SqlUnitOfWork  # noqa: E402
import loremlist.models  # noqa: E402,F401


@pytest.fixture
def test_engine():
    engine = create_engine(
        "sqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    return sessionmaker(test_engine, class_=Session, expire_on_commit=False)


@pytest.fixture
def uow_factory(test_session_factory):
    return lambda: SqlUnitOfWork(test_session_factory)
