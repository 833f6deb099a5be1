"""Boundary Protocols - persistence contracts between core and shell.

Invariants:
    - Core NEVER imports from infrastructure, models or db; dependency arrows point inward only
    - Every port call executes atomically; a UnitOfWork groups the calls of one operation
      into a single storage transaction (commit on clean exit, rollback on exception)
    - Ports report storage failures only as UniqueConstraintViolation or StorageFailure,
      with the original exception chained as __cause__
    - Counts returned by mutations are raw affected-row counts; interpretation is the engine's job

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Synchronous: the engine completes in a small constant number of storage round trips
"""

from typing import Iterable, Protocol
from uuid import UUID

from loremlist.core.entities import (
    Association, CreatedPair, ListItem, LrmItem, LrmList, Succinct,
)


# ─── Port-level failures ─────────────────────────────────────────

class StorageFailure(Exception):
    """Any storage failure the adapter could not classify further."""

    def __init__(self, operation: str, message: str = "storage operation failed"):
        super().__init__(f"{operation}: {message}")
        self.operation = operation


class UniqueConstraintViolation(StorageFailure):
    """A write collided with a uniqueness constraint."""


# ─── Stores ──────────────────────────────────────────────────────

class ListStore(Protocol):
    """Contract for list persistence - implemented by shell."""
    def find_by_owner_and_id(self, id: UUID, owner: str) -> LrmList | None: ...
    def find_by_owner(self, owner: str) -> list[LrmList]: ...
    def find_by_public(self) -> list[LrmList]: ...
    def find_by_owner_having_no_associations(self, owner: str) -> list[LrmList]: ...
    def ids_not_found(self, ids: Iterable[UUID], owner: str) -> set[UUID]: ...
    def count_by_owner(self, owner: str) -> int: ...
    def insert(self, lrm_list: LrmList) -> UUID: ...
    def update(self, lrm_list: LrmList) -> int: ...
    def delete(self, id: UUID) -> int: ...
    def delete_by_owner(self, owner: str) -> int: ...
    def delete_all(self) -> int: ...


class ItemStore(Protocol):
    """Contract for item persistence - implemented by shell."""
    def find_by_owner_and_id(self, id: UUID, owner: str) -> LrmItem | None: ...
    def find_by_owner(self, owner: str) -> list[LrmItem]: ...
    def find_by_owner_having_no_associations(self, owner: str) -> list[LrmItem]: ...
    def ids_not_found(self, ids: Iterable[UUID], owner: str) -> set[UUID]: ...
    def count_by_owner(self, owner: str) -> int: ...
    def insert(self, lrm_item: LrmItem) -> UUID: ...
    def update(self, lrm_item: LrmItem) -> int: ...
    def delete(self, id: UUID) -> int: ...
    def delete_by_owner(self, owner: str) -> int: ...
    def delete_all(self) -> int: ...


class AssociationStore(Protocol):
    """Contract for association persistence - implemented by shell.

    create_many must return exactly one CreatedPair per inserted row; the engine
    compares the count with the request.
    """
    def create_many(self, pairs: set[tuple[UUID, UUID]]) -> list[CreatedPair]: ...
    def find_one(self, list_id: UUID, item_id: UUID) -> Association | None: ...
    def find_list_item(self, list_id: UUID, item_id: UUID) -> ListItem | None: ...
    def find_items_of_list(self, list_id: UUID) -> list[Succinct]: ...
    def find_lists_of_item(self, item_id: UUID) -> list[Succinct]: ...
    def count_all(self) -> int: ...
    def count_for_list(self, list_id: UUID) -> int: ...
    def count_for_item(self, item_id: UUID) -> int: ...
    def update_list_id(
        self, item_id: UUID, from_list_id: UUID, to_list_id: UUID,
    ) -> int: ...
    def update_quantity(self, list_id: UUID, item_id: UUID, quantity: int) -> int: ...
    def update_suppressed(
        self, list_id: UUID, item_id: UUID, is_suppressed: bool,
    ) -> int: ...
    def delete_one(self, list_id: UUID, item_id: UUID) -> int: ...
    def delete_all_for_list(self, list_id: UUID) -> int: ...
    def delete_all_for_item(self, item_id: UUID) -> int: ...
    def delete_all(self) -> int: ...


class UnitOfWork(Protocol):
    """One storage transaction exposing the three stores."""
    lists: ListStore
    items: ItemStore
    associations: AssociationStore

    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
