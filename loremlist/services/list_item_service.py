"""List Item Service - items as seen from inside one list.

Invariants:
    - An item created here is associated with its list in the same transaction;
      if the association fails, the item is not kept
    - Patches touch only the association's quantity / is_suppressed, never the item
    - Each per-field update must affect exactly one association row
"""

import logging
from uuid import UUID, uuid4

from loremlist.core.domain_types import ComponentType
from loremlist.core.entities import ListItem, LrmItem, ServiceResponse
from loremlist.core.errors import (
    AssociationNotFoundError, ErrorContext, InconsistentStateError,
)
from loremlist.core.format_messages import (
    format_list_item_created, format_patch_result, format_retrieved,
)
from loremlist.core.ownership import same_owner
from loremlist.schemas.component import ListItemCreate, ListItemPatch
from loremlist.services.association_service import engine_for
from loremlist.services.component_service import utc_now
from loremlist.services.transaction import UnitOfWorkFactory, transaction

logger = logging.getLogger(__name__)


class ListItemService:
    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    def find(self, list_id: UUID, item_id: UUID, owner: str) -> ServiceResponse[ListItem]:
        with transaction(self._uow_factory, "find_list_item", owner) as uow:
            list_item = self._find(uow, list_id, item_id, owner)
        return ServiceResponse(list_item, format_retrieved(ComponentType.ITEM, list_item.name))

    def create(
        self, list_id: UUID, data: ListItemCreate, owner: str,
    ) -> ServiceResponse[ListItem]:
        """Create a new item and put it on the list with its per-list fields."""
        now = utc_now()
        lrm_item = LrmItem(
            id=uuid4(), name=data.name, owner=owner, description=data.description,
            created=now, creator=owner, updated=now, updater=owner,
        )
        with transaction(self._uow_factory, "create_list_item", owner) as uow:
            engine = engine_for(uow)
            lrm_list = engine.resolve_list(list_id, owner)
            uow.items.insert(lrm_item)
            engine.create_for_list(list_id, [lrm_item.id], owner)
            extras = {"quantity": data.quantity, "is_suppressed": data.is_suppressed}
            for field, value in extras.items():
                if value:
                    self._apply(uow, list_id, lrm_item.id, owner, field, value)
            list_item = self._find(uow, list_id, lrm_item.id, owner)
        logger.info("List item created",
            extra={"owner": owner, "list_id": str(list_id), "item_id": str(lrm_item.id)})
        return ServiceResponse(
            list_item, format_list_item_created(lrm_item.name, lrm_list.name),
        )

    def patch(
        self, list_id: UUID, item_id: UUID, owner: str, patch: ListItemPatch,
    ) -> ServiceResponse[ListItem]:
        with transaction(self._uow_factory, "patch_list_item", owner) as uow:
            current = self._find(uow, list_id, item_id, owner)
            changed = {
                k: v for k, v in patch.changes().items() if getattr(current, k) != v
            }
            for field, value in changed.items():
                self._apply(uow, list_id, item_id, owner, field, value)
            patched = self._find(uow, list_id, item_id, owner) if changed else current
        return ServiceResponse(
            patched,
            format_patch_result(ComponentType.ITEM, patched.name, list(changed)),
        )

    def _find(self, uow, list_id: UUID, item_id: UUID, owner: str) -> ListItem:
        lrm_list = engine_for(uow).resolve_list(list_id, owner)
        list_item = uow.associations.find_list_item(list_id, item_id)
        if list_item is None or not same_owner(lrm_list, list_item):
            raise AssociationNotFoundError(
                item_id, list_id,
                ErrorContext(owner=owner, list_id=list_id, item_id=item_id),
            )
        return list_item

    @staticmethod
    def _apply(uow, list_id: UUID, item_id: UUID, owner: str, field: str, value) -> None:
        if field == "quantity":
            updated = uow.associations.update_quantity(list_id, item_id, value)
        else:
            updated = uow.associations.update_suppressed(list_id, item_id, value)
        if updated != 1:
            logger.error("List item update affected unexpected row count",
                extra={"owner": owner, "list_id": str(list_id),
                       "item_id": str(item_id), "count": updated})
            raise InconsistentStateError(
                f"Item id {item_id} could not be updated on list id {list_id}. "
                f"{updated} records would have been updated rather than 1.",
                context=ErrorContext(
                    owner=owner, list_id=list_id, item_id=item_id,
                    operation=f"update_{field}",
                ),
            )
