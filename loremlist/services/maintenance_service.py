"""Maintenance Service - administrative operations across all owners.

Invariants:
    - Not owner-scoped: callers must restrict access to administrators
    - purge() removes associations before items and lists, in one transaction
"""

import logging

from loremlist.core.domain_types import ComponentType
from loremlist.core.entities import PurgeCounts, ServiceResponse
from loremlist.core.format_messages import format_component_count, format_purged
from loremlist.services.association_service import engine_for
from loremlist.services.transaction import UnitOfWorkFactory, transaction

logger = logging.getLogger(__name__)


class MaintenanceService:
    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    def count_associations(self) -> ServiceResponse[int]:
        with transaction(self._uow_factory, "count_associations") as uow:
            count = engine_for(uow).count_all()
        return ServiceResponse(
            count, format_component_count(ComponentType.ASSOCIATION, count),
        )

    def purge_associations(self) -> ServiceResponse[int]:
        """Delete every association; lists and items are kept."""
        with transaction(self._uow_factory, "purge_associations") as uow:
            count = engine_for(uow).purge_all()
        return ServiceResponse(count, format_purged({ComponentType.ASSOCIATION: count}))

    def purge(self) -> ServiceResponse[PurgeCounts]:
        """Delete every association, item and list."""
        with transaction(self._uow_factory, "purge") as uow:
            counts = PurgeCounts(
                association_deleted_count=engine_for(uow).purge_all(),
                item_deleted_count=uow.items.delete_all(),
                list_deleted_count=uow.lists.delete_all(),
            )
        logger.warning("Domain purged",
            extra={"operation": "purge",
                   "count": counts.item_deleted_count + counts.list_deleted_count})
        return ServiceResponse(counts, format_purged({
            ComponentType.ASSOCIATION: counts.association_deleted_count,
            ComponentType.ITEM: counts.item_deleted_count,
            ComponentType.LIST: counts.list_deleted_count,
        }))
