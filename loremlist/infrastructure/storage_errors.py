"""Storage Error Mapping - SQLAlchemy exceptions to port-level failures.

Invariants:
    - Only StorageFailure / UniqueConstraintViolation leave a store method
    - The SQLAlchemy exception is always chained as __cause__
    - Unique violations are recognised on PostgreSQL (SQLSTATE 23505) and SQLite
"""

import functools
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)

from loremlist.core.repository_protocols import StorageFailure, UniqueConstraintViolation

logger = logging.getLogger(__name__)

_UNIQUE_VIOLATION_SQLSTATE = "23505"
_UNIQUE_VIOLATION_MESSAGES = (
    "UNIQUE constraint failed",
    "duplicate key value violates unique constraint",
)


def is_unique_violation(error: IntegrityError) -> bool:
    """True when an IntegrityError comes from a unique index."""
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == _UNIQUE_VIOLATION_SQLSTATE:
        return True
    return any(m in str(orig) for m in _UNIQUE_VIOLATION_MESSAGES)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy exceptions raised inside the block into port failures."""
    try:
        yield
    except IntegrityError as e:
        if is_unique_violation(e):
            logger.warning("DB unique violation in %s", operation,
                extra={"operation": operation})
            raise UniqueConstraintViolation(operation, "unique constraint violated") from e
        logger.error("DB integrity error in %s: %s", operation, e,
            extra={"operation": operation})
        raise StorageFailure(operation, "integrity constraint violated") from e
    except OperationalError as e:
        logger.error("DB operational error in %s: %s", operation, e,
            extra={"operation": operation})
        raise StorageFailure(operation, "connection or operational error") from e
    except DBAPIError as e:
        logger.error("DB driver error in %s: %s", operation, e,
            extra={"operation": operation})
        raise StorageFailure(operation, "database driver error") from e
    except SQLAlchemyError as e:
        logger.error("SQLAlchemy error in %s: %s", operation, e,
            extra={"operation": operation})
        raise StorageFailure(operation, "database operation failed") from e


def storage_operation(method):
    """Run a store method under storage_errors, named '<table>.<method>'."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with storage_errors(f"{self.table}.{method.__name__}"):
            return method(self, *args, **kwargs)
    return wrapper
