"""SQL Stores - SQLAlchemy adapters against in-memory SQLite.

Tests cover:
    - Owner scoping of component reads and ids_not_found
    - create_many reports names and owners of every created pair
    - Unique violations surface as UniqueConstraintViolation and roll back
    - Deleting a list or item cascades to its associations
    - Association reads are sorted by name; updates return raw row counts
"""

from dataclasses import replace
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from loremlist.core.domain_types import ComponentType
from loremlist.core.entities import LrmItem, LrmList
from loremlist.core.repository_protocols import StorageFailure, UniqueConstraintViolation


def _list(name, owner="alice", public=False):
    now = datetime.now(timezone.utc)
    return LrmList(
        id=uuid4(), name=name, owner=owner, public=public,
        created=now, creator=owner, updated=now, updater=owner,
    )


def _item(name, owner="alice"):
    now = datetime.now(timezone.utc)
    return LrmItem(
        id=uuid4(), name=name, owner=owner,
        created=now, creator=owner, updated=now, updater=owner,
    )


@pytest.fixture
def seeded(uow_factory):
    """Two lists and two items for alice, one of each for bob."""
    rows = {
        "groceries": _list("Groceries", public=True),
        "pantry": _list("Pantry"),
        "milk": _item("Milk"),
        "eggs": _item("Eggs"),
        "bob_list": _list("Garage", owner="bob"),
        "bob_item": _item("Wrench", owner="bob"),
    }
    with uow_factory() as uow:
        for row in rows.values():
            store = uow.lists if isinstance(row, LrmList) else uow.items
            store.insert(row)
    return rows


# --- Components ---------------------------------------------------------------

def test_find_by_owner_and_id_is_owner_scoped(uow_factory, seeded):
    with uow_factory() as uow:
        found = uow.lists.find_by_owner_and_id(seeded["pantry"].id, "alice")
        foreign = uow.lists.find_by_owner_and_id(seeded["pantry"].id, "bob")
    assert found.name == "Pantry"
    assert foreign is None


def test_find_by_owner_sorted_by_name(uow_factory, seeded):
    with uow_factory() as uow:
        names = [i.name for i in uow.items.find_by_owner("alice")]
    assert names == ["Eggs", "Milk"]


def test_find_by_public(uow_factory, seeded):
    with uow_factory() as uow:
        public = uow.lists.find_by_public()
    assert [l.name for l in public] == ["Groceries"]


def test_ids_not_found_includes_foreign_and_unknown(uow_factory, seeded):
    unknown = uuid4()
    with uow_factory() as uow:
        missing = uow.items.ids_not_found(
            [seeded["milk"].id, seeded["bob_item"].id, unknown], "alice",
        )
    assert missing == {seeded["bob_item"].id, unknown}


def test_update_writes_fields_and_counts(uow_factory, seeded):
    pantry = seeded["pantry"]
    with uow_factory() as uow:
        updated = uow.lists.update(replace(pantry, name="Larder", public=True))
    with uow_factory() as uow:
        stored = uow.lists.find_by_owner_and_id(pantry.id, "alice")
    assert updated == 1
    assert (stored.name, stored.public) == ("Larder", True)


def test_count_and_delete_by_owner(uow_factory, seeded):
    with uow_factory() as uow:
        assert uow.lists.count_by_owner("alice") == 2
        assert uow.lists.delete_by_owner("alice") == 2
        assert uow.lists.count_by_owner("alice") == 0
        assert uow.lists.count_by_owner("bob") == 1


# --- Associations -------------------------------------------------------------

def test_create_many_reports_every_pair(uow_factory, seeded):
    groceries, milk, eggs = seeded["groceries"], seeded["milk"], seeded["eggs"]
    with uow_factory() as uow:
        created = uow.associations.create_many(
            {(groceries.id, milk.id), (groceries.id, eggs.id)},
        )
    assert len(created) == 2
    assert {p.item.name for p in created} == {"Eggs", "Milk"}
    assert all(p.list.kind is ComponentType.LIST for p in created)
    assert all(p.item.kind is ComponentType.ITEM for p in created)
    assert all(p.list_owner == p.item_owner == "alice" for p in created)


def test_duplicate_pair_raises_unique_violation_and_rolls_back(uow_factory, seeded):
    groceries, milk, eggs = seeded["groceries"], seeded["milk"], seeded["eggs"]
    with uow_factory() as uow:
        uow.associations.create_many({(groceries.id, milk.id)})

    with pytest.raises(UniqueConstraintViolation) as exc:
        with uow_factory() as uow:
            uow.associations.create_many({(groceries.id, eggs.id)})
            uow.associations.create_many({(groceries.id, milk.id)})

    assert exc.value.operation == "lrm_list_item.create_many"
    with uow_factory() as uow:
        assert uow.associations.count_for_list(groceries.id) == 1


def test_association_to_unknown_list_is_a_storage_failure(uow_factory, seeded):
    with pytest.raises(StorageFailure) as exc:
        with uow_factory() as uow:
            uow.associations.create_many({(uuid4(), seeded["milk"].id)})
    assert not isinstance(exc.value, UniqueConstraintViolation)


def test_deleting_list_cascades_to_associations(uow_factory, seeded):
    groceries, pantry, milk = seeded["groceries"], seeded["pantry"], seeded["milk"]
    with uow_factory() as uow:
        uow.associations.create_many({(groceries.id, milk.id), (pantry.id, milk.id)})
    with uow_factory() as uow:
        assert uow.lists.delete(groceries.id) == 1
    with uow_factory() as uow:
        assert uow.associations.count_for_item(milk.id) == 1
        assert uow.associations.find_one(groceries.id, milk.id) is None


def test_deleting_item_cascades_to_associations(uow_factory, seeded):
    groceries, milk = seeded["groceries"], seeded["milk"]
    with uow_factory() as uow:
        uow.associations.create_many({(groceries.id, milk.id)})
        uow.items.delete(milk.id)
        assert uow.associations.count_all() == 0


def test_unassociated_components(uow_factory, seeded):
    groceries, milk = seeded["groceries"], seeded["milk"]
    with uow_factory() as uow:
        uow.associations.create_many({(groceries.id, milk.id)})
        lists = uow.lists.find_by_owner_having_no_associations("alice")
        items = uow.items.find_by_owner_having_no_associations("alice")
    assert [l.name for l in lists] == ["Pantry"]
    assert [i.name for i in items] == ["Eggs"]


def test_associated_components_sorted_by_name(uow_factory, seeded):
    groceries, pantry = seeded["groceries"], seeded["pantry"]
    milk, eggs = seeded["milk"], seeded["eggs"]
    with uow_factory() as uow:
        uow.associations.create_many({
            (groceries.id, milk.id), (groceries.id, eggs.id), (pantry.id, milk.id),
        })
        items = uow.associations.find_items_of_list(groceries.id)
        lists = uow.associations.find_lists_of_item(milk.id)
    assert [s.name for s in items] == ["Eggs", "Milk"]
    assert [s.name for s in lists] == ["Groceries", "Pantry"]
    assert {s.kind for s in items} == {ComponentType.ITEM}
    assert {s.kind for s in lists} == {ComponentType.LIST}
    assert items[1].id == milk.id


def test_update_list_id_moves_and_conflicts(uow_factory, seeded):
    groceries, pantry, milk = seeded["groceries"], seeded["pantry"], seeded["milk"]
    with uow_factory() as uow:
        uow.associations.create_many({(groceries.id, milk.id)})
        assert uow.associations.update_list_id(milk.id, groceries.id, pantry.id) == 1
        assert uow.associations.find_one(pantry.id, milk.id) is not None

    with pytest.raises(UniqueConstraintViolation):
        with uow_factory() as uow:
            uow.associations.create_many({(groceries.id, milk.id)})
            uow.associations.update_list_id(milk.id, groceries.id, pantry.id)


def test_list_item_fields(uow_factory, seeded):
    groceries, milk = seeded["groceries"], seeded["milk"]
    with uow_factory() as uow:
        uow.associations.create_many({(groceries.id, milk.id)})
        assert uow.associations.update_quantity(groceries.id, milk.id, 4) == 1
        assert uow.associations.update_suppressed(groceries.id, milk.id, True) == 1
        assert uow.associations.update_quantity(groceries.id, uuid4(), 1) == 0
    with uow_factory() as uow:
        list_item = uow.associations.find_list_item(groceries.id, milk.id)
    assert (list_item.name, list_item.quantity, list_item.is_suppressed) == (
        "Milk", 4, True,
    )


def test_bulk_association_deletes_return_counts(uow_factory, seeded):
    groceries, pantry = seeded["groceries"], seeded["pantry"]
    milk, eggs = seeded["milk"], seeded["eggs"]
    with uow_factory() as uow:
        uow.associations.create_many({
            (groceries.id, milk.id), (groceries.id, eggs.id), (pantry.id, milk.id),
        })
        assert uow.associations.delete_one(pantry.id, milk.id) == 1
        assert uow.associations.delete_one(pantry.id, milk.id) == 0
        assert uow.associations.delete_all_for_item(eggs.id) == 1
        assert uow.associations.delete_all_for_list(groceries.id) == 1
        assert uow.associations.delete_all() == 0
