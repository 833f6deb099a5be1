"""Transaction Scope - one UnitOfWork per public service operation.

Invariants:
    - Exactly one storage transaction per call; nothing is retried
    - A StorageFailure escaping the block (including from commit) surfaces as
      UnanticipatedStorageError with the failure chained as __cause__
    - LoremListError subclasses pass through unchanged after rollback
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from loremlist.core.errors import ErrorContext, UnanticipatedStorageError
from loremlist.core.repository_protocols import StorageFailure, UnitOfWork

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], UnitOfWork]


@contextmanager
def transaction(
    uow_factory: UnitOfWorkFactory, operation: str, owner: str | None = None,
) -> Iterator[UnitOfWork]:
    try:
        with uow_factory() as uow:
            yield uow
    except StorageFailure as e:
        logger.error("Transaction for %s failed: %s", operation, e,
            extra={"owner": owner, "operation": e.operation,
                   "error_code": "STORAGE_ERROR"})
        raise UnanticipatedStorageError(
            f"Could not complete {operation}", e.operation,
            ErrorContext(owner=owner, operation=operation),
        ) from e
