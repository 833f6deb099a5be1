"""Item Service - owner-scoped create, read, patch and delete of items."""

from uuid import UUID, uuid4

from loremlist.core.association_engine import AssociationEngine
from loremlist.core.domain_types import ComponentType
from loremlist.core.entities import ComponentsDeleted, LrmItem, ServiceResponse, Succinct
from loremlist.core.format_messages import format_item_deleted, format_items_deleted
from loremlist.schemas.component import ItemCreate, ItemPatch
from loremlist.services.component_service import ComponentService, utc_now


class ItemService(ComponentService):
    kind = ComponentType.ITEM

    def _store(self, uow):
        return uow.items

    def _resolve(self, engine: AssociationEngine, id: UUID, owner: str) -> LrmItem:
        return engine.resolve_item(id, owner)

    def _associated(self, uow, id: UUID) -> list[Succinct]:
        return uow.associations.find_lists_of_item(id)

    def _remove_associations(self, engine: AssociationEngine, id: UUID, owner: str) -> int:
        return engine.delete_all_for_item(id, owner).deleted_count

    def _deleted_message(self, name: str, associated_count: int) -> str:
        return format_item_deleted(name, associated_count)

    def _all_deleted_message(self, count: int, associated_count: int) -> str:
        return format_items_deleted(count, associated_count)

    def create(self, data: ItemCreate, owner: str) -> ServiceResponse[LrmItem]:
        now = utc_now()
        lrm_item = LrmItem(
            id=uuid4(), name=data.name, owner=owner, description=data.description,
            created=now, creator=owner, updated=now, updater=owner,
        )
        return self._insert(lrm_item, owner)

    def find_by_owner_having_no_lists(self, owner: str) -> ServiceResponse[list[LrmItem]]:
        return self._find_unassociated(owner)

    def find_lists(self, item_id: UUID, owner: str) -> ServiceResponse[list[Succinct]]:
        return self._find_associated(item_id, owner)

    def patch(self, id: UUID, owner: str, patch: ItemPatch) -> ServiceResponse[LrmItem]:
        return self._patch(id, owner, patch.changes())

    def delete_by_owner_and_id(
        self, id: UUID, owner: str, remove_list_associations: bool = False,
    ) -> ServiceResponse[ComponentsDeleted]:
        return self._delete(id, owner, remove_list_associations)
