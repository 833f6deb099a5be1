"""SQL Stores - SQLAlchemy implementations of the list, item and association ports.

Invariants:
    - Stores never commit; the SqlUnitOfWork owns the transaction
    - Every public method runs under storage_operation, so only port failures escape
    - ORM rows are converted to core entities before they leave this module
    - Mutations return raw affected-row counts (CursorResult.rowcount)
"""

from typing import Iterable
from uuid import UUID

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.orm import Session, aliased

from loremlist.core.entities import (
    Association, CreatedPair, ListItem, LrmItem, LrmList, Succinct,
)
from loremlist.infrastructure.storage_errors import storage_operation
from loremlist.models.lrm_item import LrmItemModel
from loremlist.models.lrm_list import LrmListModel
from loremlist.models.lrm_list_item import LrmListItemModel


def _to_list(row: LrmListModel) -> LrmList:
    return LrmList(
        id=row.id, name=row.name, owner=row.owner, description=row.description,
        public=row.public, created=row.created, creator=row.creator,
        updated=row.updated, updater=row.updater,
    )


def _to_item(row: LrmItemModel) -> LrmItem:
    return LrmItem(
        id=row.id, name=row.name, owner=row.owner, description=row.description,
        created=row.created, creator=row.creator,
        updated=row.updated, updater=row.updater,
    )


class _ComponentStore:
    """Queries shared by lists and items; subclasses bind the model and converter."""

    model: type
    table: str

    def __init__(self, session: Session):
        self.session = session

    def _to_entity(self, row):
        raise NotImplementedError

    def _values(self, entity) -> dict:
        return {
            "name": entity.name,
            "description": entity.description,
            "updated": entity.updated,
            "updater": entity.updater,
        }

    @storage_operation
    def find_by_owner_and_id(self, id: UUID, owner: str):
        row = self.session.execute(
            select(self.model).where(self.model.id == id, self.model.owner == owner),
        ).scalar_one_or_none()
        return self._to_entity(row) if row is not None else None

    @storage_operation
    def find_by_owner(self, owner: str) -> list:
        rows = self.session.execute(
            select(self.model)
            .where(self.model.owner == owner)
            .order_by(self.model.name, self.model.id),
        ).scalars()
        return [self._to_entity(r) for r in rows]

    @storage_operation
    def find_by_owner_having_no_associations(self, owner: str) -> list:
        fk = self._association_fk()
        rows = self.session.execute(
            select(self.model)
            .where(self.model.owner == owner)
            .where(~exists().where(fk == self.model.id))
            .order_by(self.model.name, self.model.id),
        ).scalars()
        return [self._to_entity(r) for r in rows]

    @storage_operation
    def ids_not_found(self, ids: Iterable[UUID], owner: str) -> set[UUID]:
        wanted = set(ids)
        if not wanted:
            return set()
        found = self.session.execute(
            select(self.model.id)
            .where(self.model.id.in_(wanted), self.model.owner == owner),
        ).scalars()
        return wanted - set(found)

    @storage_operation
    def count_by_owner(self, owner: str) -> int:
        return self.session.execute(
            select(func.count()).select_from(self.model)
            .where(self.model.owner == owner),
        ).scalar_one()

    @storage_operation
    def insert(self, entity) -> UUID:
        row = self.model(
            id=entity.id, owner=entity.owner,
            created=entity.created, creator=entity.creator,
            **self._values(entity),
        )
        self.session.add(row)
        self.session.flush()
        return row.id

    @storage_operation
    def update(self, entity) -> int:
        result = self.session.execute(
            update(self.model)
            .where(self.model.id == entity.id)
            .values(**self._values(entity)),
        )
        return result.rowcount

    @storage_operation
    def delete(self, id: UUID) -> int:
        return self.session.execute(
            delete(self.model).where(self.model.id == id),
        ).rowcount

    @storage_operation
    def delete_by_owner(self, owner: str) -> int:
        return self.session.execute(
            delete(self.model).where(self.model.owner == owner),
        ).rowcount

    @storage_operation
    def delete_all(self) -> int:
        return self.session.execute(delete(self.model)).rowcount

    def _association_fk(self):
        raise NotImplementedError


class SqlListStore(_ComponentStore):
    model = LrmListModel
    table = "lrm_list"

    def _to_entity(self, row: LrmListModel) -> LrmList:
        return _to_list(row)

    def _values(self, entity: LrmList) -> dict:
        return {**super()._values(entity), "public": entity.public}

    def _association_fk(self):
        return LrmListItemModel.list_id

    @storage_operation
    def find_by_public(self) -> list[LrmList]:
        rows = self.session.execute(
            select(LrmListModel)
            .where(LrmListModel.public.is_(True))
            .order_by(LrmListModel.name, LrmListModel.id),
        ).scalars()
        return [_to_list(r) for r in rows]


class SqlItemStore(_ComponentStore):
    model = LrmItemModel
    table = "lrm_item"

    def _to_entity(self, row: LrmItemModel) -> LrmItem:
        return _to_item(row)

    def _association_fk(self):
        return LrmListItemModel.item_id


class SqlAssociationStore:
    table = "lrm_list_item"

    def __init__(self, session: Session):
        self.session = session

    @storage_operation
    def create_many(self, pairs: set[tuple[UUID, UUID]]) -> list[CreatedPair]:
        rows = [
            LrmListItemModel(list_id=list_id, item_id=item_id)
            for list_id, item_id in pairs
        ]
        self.session.add_all(rows)
        self.session.flush()

        lst = aliased(LrmListModel)
        itm = aliased(LrmItemModel)
        created = self.session.execute(
            select(lst, itm)
            .select_from(LrmListItemModel)
            .join(lst, lst.id == LrmListItemModel.list_id)
            .join(itm, itm.id == LrmListItemModel.item_id)
            .where(LrmListItemModel.id.in_([r.id for r in rows])),
        ).all()
        return [
            CreatedPair(
                list=_to_list(list_row).succinct(),
                item=_to_item(item_row).succinct(),
                list_owner=list_row.owner,
                item_owner=item_row.owner,
            )
            for list_row, item_row in created
        ]

    @storage_operation
    def find_one(self, list_id: UUID, item_id: UUID) -> Association | None:
        row = self.session.execute(
            select(LrmListItemModel).where(
                LrmListItemModel.list_id == list_id,
                LrmListItemModel.item_id == item_id,
            ),
        ).scalar_one_or_none()
        if row is None:
            return None
        return Association(
            list_id=row.list_id, item_id=row.item_id,
            quantity=row.quantity, is_suppressed=row.is_suppressed,
        )

    @storage_operation
    def find_list_item(self, list_id: UUID, item_id: UUID) -> ListItem | None:
        found = self.session.execute(
            select(LrmItemModel, LrmListItemModel)
            .join(LrmListItemModel, LrmListItemModel.item_id == LrmItemModel.id)
            .where(
                LrmListItemModel.list_id == list_id,
                LrmListItemModel.item_id == item_id,
            ),
        ).one_or_none()
        if found is None:
            return None
        item, assoc = found
        return ListItem(
            id=item.id, list_id=assoc.list_id, name=item.name, owner=item.owner,
            description=item.description, quantity=assoc.quantity,
            is_suppressed=assoc.is_suppressed, created=item.created,
            creator=item.creator, updated=item.updated, updater=item.updater,
        )

    @storage_operation
    def find_items_of_list(self, list_id: UUID) -> list[Succinct]:
        rows = self.session.execute(
            select(LrmItemModel)
            .join(LrmListItemModel, LrmListItemModel.item_id == LrmItemModel.id)
            .where(LrmListItemModel.list_id == list_id)
            .order_by(LrmItemModel.name, LrmItemModel.id),
        ).scalars()
        return [_to_item(r).succinct() for r in rows]

    @storage_operation
    def find_lists_of_item(self, item_id: UUID) -> list[Succinct]:
        rows = self.session.execute(
            select(LrmListModel)
            .join(LrmListItemModel, LrmListItemModel.list_id == LrmListModel.id)
            .where(LrmListItemModel.item_id == item_id)
            .order_by(LrmListModel.name, LrmListModel.id),
        ).scalars()
        return [_to_list(r).succinct() for r in rows]

    @storage_operation
    def count_all(self) -> int:
        return self.session.execute(
            select(func.count()).select_from(LrmListItemModel),
        ).scalar_one()

    @storage_operation
    def count_for_list(self, list_id: UUID) -> int:
        return self.session.execute(
            select(func.count()).select_from(LrmListItemModel)
            .where(LrmListItemModel.list_id == list_id),
        ).scalar_one()

    @storage_operation
    def count_for_item(self, item_id: UUID) -> int:
        return self.session.execute(
            select(func.count()).select_from(LrmListItemModel)
            .where(LrmListItemModel.item_id == item_id),
        ).scalar_one()

    @storage_operation
    def update_list_id(
        self, item_id: UUID, from_list_id: UUID, to_list_id: UUID,
    ) -> int:
        return self.session.execute(
            update(LrmListItemModel)
            .where(
                LrmListItemModel.item_id == item_id,
                LrmListItemModel.list_id == from_list_id,
            )
            .values(list_id=to_list_id),
        ).rowcount

    @storage_operation
    def update_quantity(self, list_id: UUID, item_id: UUID, quantity: int) -> int:
        return self._update_pair(list_id, item_id, quantity=quantity)

    @storage_operation
    def update_suppressed(
        self, list_id: UUID, item_id: UUID, is_suppressed: bool,
    ) -> int:
        return self._update_pair(list_id, item_id, is_suppressed=is_suppressed)

    def _update_pair(self, list_id: UUID, item_id: UUID, **values) -> int:
        return self.session.execute(
            update(LrmListItemModel)
            .where(
                LrmListItemModel.list_id == list_id,
                LrmListItemModel.item_id == item_id,
            )
            .values(**values),
        ).rowcount

    @storage_operation
    def delete_one(self, list_id: UUID, item_id: UUID) -> int:
        return self.session.execute(
            delete(LrmListItemModel).where(
                LrmListItemModel.list_id == list_id,
                LrmListItemModel.item_id == item_id,
            ),
        ).rowcount

    @storage_operation
    def delete_all_for_list(self, list_id: UUID) -> int:
        return self.session.execute(
            delete(LrmListItemModel).where(LrmListItemModel.list_id == list_id),
        ).rowcount

    @storage_operation
    def delete_all_for_item(self, item_id: UUID) -> int:
        return self.session.execute(
            delete(LrmListItemModel).where(LrmListItemModel.item_id == item_id),
        ).rowcount

    @storage_operation
    def delete_all(self) -> int:
        return self.session.execute(delete(LrmListItemModel)).rowcount

