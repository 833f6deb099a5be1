"""Association Engine - create, move, count and delete list/item associations.

Invariants:
    - Stateless: every call re-reads through the ports; no caching between calls
    - An association never crosses owners (checked on every created pair, and
      on the resolved item and lists before a single delete or a move)
    - Bulk creation is all-or-nothing: any failure raises and the enclosing
      UnitOfWork rolls back
    - Storage failures never leak: they surface as typed LoremListError subclasses
      with the port failure chained as __cause__

Design Decisions:
    - Engine receives stores, not a session: transaction scope belongs to the caller
    - A zero-row single delete is disambiguated by re-reading the pair
      (gone means a concurrent delete won, present means inconsistent state)
    - Moving an item onto the list it already sits on is a no-op success
"""

import logging
from typing import Iterable
from uuid import UUID

from loremlist.core.entities import (
    AssociationCreated, AssociationDeleted, AssociationMoved, AssociationsDeleted,
    CreatedPair, LrmItem, LrmList,
)
from loremlist.core.errors import (
    AlreadyAssociatedError, AssociationCountMismatchError, AssociationMoveError,
    AssociationNotFoundError, ComponentValidationError, ErrorContext,
    InconsistentStateError, ItemNotFoundError, ListNotFoundError,
    MultipleAssociationsError, OwnershipMismatchError, UnanticipatedStorageError,
)
from loremlist.core.ownership import association_is_consistent, same_owner
from loremlist.core.repository_protocols import (
    AssociationStore, ItemStore, ListStore, StorageFailure, UniqueConstraintViolation,
)

logger = logging.getLogger(__name__)


def _distinct(ids: Iterable[UUID]) -> list[UUID]:
    """Collapse duplicates, keeping first-seen order."""
    return list(dict.fromkeys(ids))


class AssociationEngine:
    """Association rules over the three stores of one unit of work."""

    def __init__(
        self, lists: ListStore, items: ItemStore, associations: AssociationStore,
    ):
        self.lists = lists
        self.items = items
        self.associations = associations

    # ─── Resolution ──────────────────────────────────────────────

    def resolve_list(self, list_id: UUID, owner: str) -> LrmList:
        lrm_list = self.lists.find_by_owner_and_id(list_id, owner)
        if lrm_list is None:
            raise ListNotFoundError(
                list_id, context=ErrorContext(owner=owner, list_id=list_id),
            )
        return lrm_list

    def resolve_item(self, item_id: UUID, owner: str) -> LrmItem:
        lrm_item = self.items.find_by_owner_and_id(item_id, owner)
        if lrm_item is None:
            raise ItemNotFoundError(
                item_id, context=ErrorContext(owner=owner, item_id=item_id),
            )
        return lrm_item

    def _check_owners(
        self, lrm_item: LrmItem, lists: Iterable[LrmList], ctx: ErrorContext,
    ) -> None:
        for lrm_list in lists:
            if not same_owner(lrm_item, lrm_list):
                logger.error("Resolved components cross owners",
                    extra={"owner": ctx.owner, "list_id": str(lrm_list.id),
                           "item_id": str(lrm_item.id)})
                raise OwnershipMismatchError(
                    f"Item '{lrm_item.name}' and list '{lrm_list.name}' "
                    "have different owners.",
                    ctx,
                )

    # ─── Create ──────────────────────────────────────────────────

    def create_for_item(
        self, item_id: UUID, list_ids: Iterable[UUID], owner: str,
    ) -> AssociationCreated:
        """Associate one item with every list in list_ids."""
        ctx = ErrorContext(owner=owner, item_id=item_id, operation="create_for_item")
        distinct_ids = _distinct(list_ids)
        if not distinct_ids:
            raise ComponentValidationError(
                "At least one list id is required.", field="list_ids", context=ctx,
            )
        lrm_item = self.resolve_item(item_id, owner)
        missing = self.lists.ids_not_found(distinct_ids, owner)
        if missing:
            logger.warning("Lists not found for association",
                extra={"owner": owner, "item_id": str(item_id), "count": len(missing)})
            raise ListNotFoundError(missing, context=ctx)

        pairs = {(list_id, item_id) for list_id in distinct_ids}
        created = self._create_many(pairs, lrm_item.name, ctx)
        return AssociationCreated(
            component_name=lrm_item.name,
            associated_components=sorted(
                (pair.list for pair in created), key=lambda s: s.name,
            ),
        )

    def create_for_list(
        self, list_id: UUID, item_ids: Iterable[UUID], owner: str,
    ) -> AssociationCreated:
        """Associate one list with every item in item_ids."""
        ctx = ErrorContext(owner=owner, list_id=list_id, operation="create_for_list")
        distinct_ids = _distinct(item_ids)
        if not distinct_ids:
            raise ComponentValidationError(
                "At least one item id is required.", field="item_ids", context=ctx,
            )
        lrm_list = self.resolve_list(list_id, owner)
        missing = self.items.ids_not_found(distinct_ids, owner)
        if missing:
            logger.warning("Items not found for association",
                extra={"owner": owner, "list_id": str(list_id), "count": len(missing)})
            raise ItemNotFoundError(missing, context=ctx)

        pairs = {(list_id, item_id) for item_id in distinct_ids}
        created = self._create_many(pairs, lrm_list.name, ctx)
        return AssociationCreated(
            component_name=lrm_list.name,
            associated_components=sorted(
                (pair.item for pair in created), key=lambda s: s.name,
            ),
        )

    def _create_many(
        self, pairs: set[tuple[UUID, UUID]], anchor_name: str, ctx: ErrorContext,
    ) -> list[CreatedPair]:
        try:
            created = self.associations.create_many(pairs)
        except UniqueConstraintViolation as e:
            logger.warning("Association already exists",
                extra={"owner": ctx.owner, "operation": ctx.operation})
            raise AlreadyAssociatedError(
                f"'{anchor_name}' is already associated with one or more of "
                "the requested components.",
                context=ctx,
            ) from e
        except StorageFailure as e:
            logger.error("Association creation failed: %s", e,
                extra={"owner": ctx.owner, "operation": e.operation})
            raise UnanticipatedStorageError(
                "Could not create associations", e.operation, ctx,
            ) from e

        if len(created) != len(pairs):
            logger.error("Created association count mismatch",
                extra={"owner": ctx.owner, "operation": ctx.operation,
                       "count": len(created)})
            raise AssociationCountMismatchError(len(pairs), len(created), ctx)

        for pair in created:
            if not association_is_consistent(pair):
                logger.error("Association crosses owners",
                    extra={"owner": ctx.owner, "list_id": str(pair.list.id),
                           "item_id": str(pair.item.id)})
                raise OwnershipMismatchError(
                    f"List '{pair.list.name}' and item '{pair.item.name}' "
                    "have different owners.",
                    ctx,
                )

        logger.info("Associations created",
            extra={"owner": ctx.owner, "operation": ctx.operation,
                   "count": len(created)})
        return created

    # ─── Delete ──────────────────────────────────────────────────

    def delete_one(
        self, item_id: UUID, list_id: UUID, owner: str,
    ) -> AssociationDeleted:
        ctx = ErrorContext(
            owner=owner, item_id=item_id, list_id=list_id, operation="delete_one",
        )
        lrm_item = self.resolve_item(item_id, owner)
        lrm_list = self.resolve_list(list_id, owner)
        self._check_owners(lrm_item, [lrm_list], ctx)
        if self.associations.find_one(list_id, item_id) is None:
            raise AssociationNotFoundError(item_id, list_id, ctx)

        deleted = self._guard_storage(
            lambda: self.associations.delete_one(list_id, item_id),
            "Could not remove association", ctx,
        )
        if deleted == 0:
            if self.associations.find_one(list_id, item_id) is None:
                logger.warning("Association removed concurrently",
                    extra={"owner": owner, "list_id": str(list_id),
                           "item_id": str(item_id)})
                raise AssociationNotFoundError(item_id, list_id, ctx)
            logger.error("Association delete affected no rows",
                extra={"owner": owner, "list_id": str(list_id), "item_id": str(item_id)})
            raise InconsistentStateError(
                f"Association of item '{lrm_item.name}' with list "
                f"'{lrm_list.name}' was found but could not be removed.",
                context=ctx,
            )
        if deleted > 1:
            logger.error("Association delete affected multiple rows",
                extra={"owner": owner, "list_id": str(list_id),
                       "item_id": str(item_id), "count": deleted})
            raise MultipleAssociationsError(
                f"Removing item '{lrm_item.name}' from list '{lrm_list.name}' "
                f"affected {deleted} associations.",
                deleted, ctx,
            )

        logger.info("Association removed",
            extra={"owner": owner, "list_id": str(list_id), "item_id": str(item_id)})
        return AssociationDeleted(item_name=lrm_item.name, list_name=lrm_list.name)

    def delete_all_for_item(self, item_id: UUID, owner: str) -> AssociationsDeleted:
        ctx = ErrorContext(owner=owner, item_id=item_id, operation="delete_all_for_item")
        lrm_item = self.resolve_item(item_id, owner)
        count = self._guard_storage(
            lambda: self.associations.delete_all_for_item(item_id),
            "Could not remove item associations", ctx,
        )
        logger.info("Item associations removed",
            extra={"owner": owner, "item_id": str(item_id), "count": count})
        return AssociationsDeleted(component_name=lrm_item.name, deleted_count=count)

    def delete_all_for_list(self, list_id: UUID, owner: str) -> AssociationsDeleted:
        ctx = ErrorContext(owner=owner, list_id=list_id, operation="delete_all_for_list")
        lrm_list = self.resolve_list(list_id, owner)
        count = self._guard_storage(
            lambda: self.associations.delete_all_for_list(list_id),
            "Could not remove list associations", ctx,
        )
        logger.info("List associations removed",
            extra={"owner": owner, "list_id": str(list_id), "count": count})
        return AssociationsDeleted(component_name=lrm_list.name, deleted_count=count)

    def purge_all(self) -> int:
        """Remove every association of every owner."""
        ctx = ErrorContext(operation="purge_all")
        count = self._guard_storage(
            self.associations.delete_all, "Could not purge associations", ctx,
        )
        logger.info("All associations purged", extra={"count": count})
        return count

    # ─── Move ────────────────────────────────────────────────────

    def move_item(
        self,
        item_id: UUID,
        current_list_id: UUID,
        destination_list_id: UUID,
        owner: str,
    ) -> AssociationMoved:
        ctx = ErrorContext(
            owner=owner, item_id=item_id, list_id=current_list_id, operation="move_item",
        )
        lrm_item = self.resolve_item(item_id, owner)
        current = self.resolve_list(current_list_id, owner)
        destination = self.resolve_list(destination_list_id, owner)
        self._check_owners(lrm_item, [current, destination], ctx)
        if self.associations.find_one(current_list_id, item_id) is None:
            raise AssociationNotFoundError(item_id, current_list_id, ctx)

        moved = AssociationMoved(
            item_name=lrm_item.name,
            current_list_name=current.name,
            destination_list_name=destination.name,
        )
        if current_list_id == destination_list_id:
            return moved

        message = (
            f"Could not move item '{lrm_item.name}' from list '{current.name}' "
            f"to list '{destination.name}'"
        )
        try:
            updated = self.associations.update_list_id(
                item_id, current_list_id, destination_list_id,
            )
        except UniqueConstraintViolation as e:
            logger.warning("Item already on destination list",
                extra={"owner": owner, "item_id": str(item_id),
                       "list_id": str(destination_list_id)})
            raise AssociationMoveError(
                f"{message}: it is already on the destination list.",
                conflict=True, context=ctx,
            ) from e
        except StorageFailure as e:
            logger.error("Association move failed: %s", e,
                extra={"owner": owner, "item_id": str(item_id),
                       "operation": e.operation})
            raise AssociationMoveError(f"{message}.", context=ctx) from e

        if updated != 1:
            logger.error("Association move affected unexpected row count",
                extra={"owner": owner, "item_id": str(item_id), "count": updated})
            raise AssociationMoveError(
                f"{message}: {updated} associations were updated.", context=ctx,
            )

        logger.info("Association moved",
            extra={"owner": owner, "item_id": str(item_id),
                   "list_id": str(destination_list_id)})
        return moved

    # ─── Count ───────────────────────────────────────────────────

    def count_for_item(self, item_id: UUID, owner: str) -> int:
        self.resolve_item(item_id, owner)
        return self.associations.count_for_item(item_id)

    def count_for_list(self, list_id: UUID, owner: str) -> int:
        self.resolve_list(list_id, owner)
        return self.associations.count_for_list(list_id)

    def count_all(self) -> int:
        return self.associations.count_all()

    # ─── Helpers ─────────────────────────────────────────────────

    @staticmethod
    def _guard_storage(call, message: str, ctx: ErrorContext):
        try:
            return call()
        except StorageFailure as e:
            logger.error("%s: %s", message, e,
                extra={"owner": ctx.owner, "operation": e.operation})
            raise UnanticipatedStorageError(message, e.operation, ctx) from e
