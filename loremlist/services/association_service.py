"""Association Service - transactional facade over the association engine.

Invariants:
    - Each public method opens one UnitOfWork, builds a fresh AssociationEngine over
      its stores, and returns a ServiceResponse (content + human-readable message)
    - Failures are typed LoremListError subclasses; nothing is retried
    - Global purge is not exposed here (see maintenance_service.py)
"""

import logging
from typing import Iterable
from uuid import UUID

from loremlist.core.association_engine import AssociationEngine
from loremlist.core.domain_types import ComponentType
from loremlist.core.entities import (
    AssociationCreated, AssociationDeleted, AssociationMoved, AssociationsDeleted,
    ServiceResponse,
)
from loremlist.core.format_messages import (
    format_association_count, format_association_created, format_association_deleted,
    format_association_moved, format_item_removed_from_lists,
    format_items_removed_from_list,
)
from loremlist.services.transaction import UnitOfWorkFactory, transaction

logger = logging.getLogger(__name__)


def engine_for(uow) -> AssociationEngine:
    return AssociationEngine(uow.lists, uow.items, uow.associations)


class AssociationService:
    """Create, move, count and remove list/item associations for one owner."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    def create_for_item(
        self, item_id: UUID, list_ids: Iterable[UUID], owner: str,
    ) -> ServiceResponse[AssociationCreated]:
        with transaction(self._uow_factory, "create_for_item", owner) as uow:
            created = engine_for(uow).create_for_item(item_id, list_ids, owner)
        return ServiceResponse(
            created, format_association_created(ComponentType.ITEM, created),
        )

    def create_for_list(
        self, list_id: UUID, item_ids: Iterable[UUID], owner: str,
    ) -> ServiceResponse[AssociationCreated]:
        with transaction(self._uow_factory, "create_for_list", owner) as uow:
            created = engine_for(uow).create_for_list(list_id, item_ids, owner)
        return ServiceResponse(
            created, format_association_created(ComponentType.LIST, created),
        )

    def delete_one(
        self, item_id: UUID, list_id: UUID, owner: str,
    ) -> ServiceResponse[AssociationDeleted]:
        with transaction(self._uow_factory, "delete_one", owner) as uow:
            deleted = engine_for(uow).delete_one(item_id, list_id, owner)
        return ServiceResponse(
            deleted, format_association_deleted(deleted.item_name, deleted.list_name),
        )

    def delete_all_for_item(
        self, item_id: UUID, owner: str,
    ) -> ServiceResponse[AssociationsDeleted]:
        with transaction(self._uow_factory, "delete_all_for_item", owner) as uow:
            deleted = engine_for(uow).delete_all_for_item(item_id, owner)
        return ServiceResponse(
            deleted,
            format_item_removed_from_lists(deleted.component_name, deleted.deleted_count),
        )

    def delete_all_for_list(
        self, list_id: UUID, owner: str,
    ) -> ServiceResponse[AssociationsDeleted]:
        with transaction(self._uow_factory, "delete_all_for_list", owner) as uow:
            deleted = engine_for(uow).delete_all_for_list(list_id, owner)
        return ServiceResponse(
            deleted,
            format_items_removed_from_list(deleted.component_name, deleted.deleted_count),
        )

    def move_item(
        self,
        item_id: UUID,
        current_list_id: UUID,
        destination_list_id: UUID,
        owner: str,
    ) -> ServiceResponse[AssociationMoved]:
        with transaction(self._uow_factory, "move_item", owner) as uow:
            moved = engine_for(uow).move_item(
                item_id, current_list_id, destination_list_id, owner,
            )
        return ServiceResponse(
            moved,
            format_association_moved(
                moved.item_name, moved.current_list_name, moved.destination_list_name,
            ),
        )

    def count_for_item(self, item_id: UUID, owner: str) -> ServiceResponse[int]:
        with transaction(self._uow_factory, "count_for_item", owner) as uow:
            count = engine_for(uow).count_for_item(item_id, owner)
        return ServiceResponse(count, format_association_count(ComponentType.ITEM, count))

    def count_for_list(self, list_id: UUID, owner: str) -> ServiceResponse[int]:
        with transaction(self._uow_factory, "count_for_list", owner) as uow:
            count = engine_for(uow).count_for_list(list_id, owner)
        return ServiceResponse(count, format_association_count(ComponentType.LIST, count))
