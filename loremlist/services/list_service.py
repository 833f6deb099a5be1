"""List Service - owner-scoped create, read, patch and delete of lists.

Invariants:
    - Public lists are readable by anyone through find_by_public(); every other
      operation is scoped to the owner
    - Deleting a list with items requires remove_item_associations=True
"""

from uuid import UUID, uuid4

from loremlist.core.association_engine import AssociationEngine
from loremlist.core.domain_types import ComponentType
from loremlist.core.entities import ComponentsDeleted, LrmList, ServiceResponse, Succinct
from loremlist.core.format_messages import (
    format_list_deleted, format_lists_deleted, format_retrieved_many,
)
from loremlist.schemas.component import ListCreate, ListPatch
from loremlist.services.component_service import ComponentService, utc_now
from loremlist.services.transaction import transaction


class ListService(ComponentService):
    kind = ComponentType.LIST

    def _store(self, uow):
        return uow.lists

    def _resolve(self, engine: AssociationEngine, id: UUID, owner: str) -> LrmList:
        return engine.resolve_list(id, owner)

    def _associated(self, uow, id: UUID) -> list[Succinct]:
        return uow.associations.find_items_of_list(id)

    def _remove_associations(self, engine: AssociationEngine, id: UUID, owner: str) -> int:
        return engine.delete_all_for_list(id, owner).deleted_count

    def _deleted_message(self, name: str, associated_count: int) -> str:
        return format_list_deleted(name, associated_count)

    def _all_deleted_message(self, count: int, associated_count: int) -> str:
        return format_lists_deleted(count, associated_count)

    def create(self, data: ListCreate, owner: str) -> ServiceResponse[LrmList]:
        now = utc_now()
        lrm_list = LrmList(
            id=uuid4(), name=data.name, owner=owner, description=data.description,
            public=data.public, created=now, creator=owner, updated=now, updater=owner,
        )
        return self._insert(lrm_list, owner)

    def find_by_public(self) -> ServiceResponse[list[LrmList]]:
        with transaction(self._uow_factory, "find_public_lists") as uow:
            lists = uow.lists.find_by_public()
        return ServiceResponse(lists, format_retrieved_many(self.kind, len(lists)))

    def find_by_owner_having_no_items(self, owner: str) -> ServiceResponse[list[LrmList]]:
        return self._find_unassociated(owner)

    def find_items(self, list_id: UUID, owner: str) -> ServiceResponse[list[Succinct]]:
        """Items of one list, sorted by name."""
        return self._find_associated(list_id, owner)

    def patch(self, id: UUID, owner: str, patch: ListPatch) -> ServiceResponse[LrmList]:
        return self._patch(id, owner, patch.changes())

    def delete_by_owner_and_id(
        self, id: UUID, owner: str, remove_item_associations: bool = False,
    ) -> ServiceResponse[ComponentsDeleted]:
        return self._delete(id, owner, remove_item_associations)
