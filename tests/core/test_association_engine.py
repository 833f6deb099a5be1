"""Association Engine - behaviour over scripted in-memory stores.

Tests cover:
    - Create fan-out in both directions, ordering, dedupe and empty input
    - Not-found resolution order and the full set of missing ids
    - Failure translation: unique violation, other storage failure, count mismatch,
      cross-owner pairs
    - Single delete: success, concurrent delete, inconsistent state, multiple rows
    - Bulk delete and purge counts
    - Move: success, no-op, conflict, storage failure, unexpected row count
    - Single delete and move refuse resolved lists of another owner
    - Counting resolves the owning entity first
"""

from uuid import uuid4

import pytest

from loremlist.core.association_engine import AssociationEngine
from loremlist.core.domain_types import ComponentType
from loremlist.core.entities import CreatedPair, Succinct
from loremlist.core.errors import (
    AlreadyAssociatedError, AssociationCountMismatchError, AssociationMoveError,
    AssociationNotFoundError, ComponentValidationError, ErrorCategory,
    InconsistentStateError, ItemNotFoundError, ListNotFoundError,
    MultipleAssociationsError, OwnershipMismatchError, UnanticipatedStorageError,
)
from loremlist.core.repository_protocols import StorageFailure, UniqueConstraintViolation

from fake_stores import FakeUnitOfWork


@pytest.fixture
def uow():
    return FakeUnitOfWork()


@pytest.fixture
def engine(uow):
    return AssociationEngine(uow.lists, uow.items, uow.associations)


# --- Create for item ----------------------------------------------------------

def test_create_for_item_associates_every_list(uow, engine):
    milk = uow.add_item("Milk")
    pantry, groceries = uow.add_list("Pantry"), uow.add_list("Groceries")

    created = engine.create_for_item(milk.id, [pantry.id, groceries.id], "alice")

    assert created.component_name == "Milk"
    assert [s.name for s in created.associated_components] == ["Groceries", "Pantry"]
    assert all(s.kind is ComponentType.LIST for s in created.associated_components)
    assert uow.associations.count_for_item(milk.id) == 2


def test_create_for_list_associates_every_item(uow, engine):
    groceries = uow.add_list("Groceries")
    milk, eggs = uow.add_item("Milk"), uow.add_item("Eggs")

    created = engine.create_for_list(groceries.id, [milk.id, eggs.id], "alice")

    assert created.component_name == "Groceries"
    assert [s.name for s in created.associated_components] == ["Eggs", "Milk"]
    assert uow.associations.count_for_list(groceries.id) == 2


def test_duplicate_ids_in_request_are_collapsed(uow, engine):
    milk = uow.add_item("Milk")
    groceries = uow.add_list("Groceries")

    created = engine.create_for_item(milk.id, [groceries.id, groceries.id], "alice")

    assert len(created.associated_components) == 1
    assert uow.associations.count_for_list(groceries.id) == 1


def test_empty_id_collection_is_rejected(uow, engine):
    milk = uow.add_item("Milk")
    with pytest.raises(ComponentValidationError) as exc:
        engine.create_for_item(milk.id, [], "alice")
    assert exc.value.field == "list_ids"
    assert "create_many" not in uow.associations.calls


def test_missing_anchor_raises_before_other_ids_are_checked(uow, engine):
    groceries = uow.add_list("Groceries")
    with pytest.raises(ItemNotFoundError):
        engine.create_for_item(uuid4(), [groceries.id], "alice")
    assert "ids_not_found" not in uow.lists.calls


def test_foreign_owner_item_is_not_found(uow, engine):
    groceries = uow.add_list("Groceries", owner="alice")
    eggs = uow.add_item("Eggs", owner="bob")

    with pytest.raises(ItemNotFoundError) as exc:
        engine.create_for_list(groceries.id, [eggs.id], "alice")

    assert exc.value.ids == [eggs.id]
    assert uow.associations.rows == {}


def test_all_missing_ids_are_reported_and_nothing_is_created(uow, engine):
    milk = uow.add_item("Milk")
    missing = [uuid4() for _ in range(3)]

    with pytest.raises(ListNotFoundError) as exc:
        engine.create_for_item(milk.id, missing, "alice")

    assert set(exc.value.ids) == set(missing)
    assert exc.value.message == "Lists (3) could not be found."
    assert "create_many" not in uow.associations.calls


# --- Create failure translation -----------------------------------------------

def test_unique_violation_becomes_already_associated(uow, engine):
    milk, groceries = uow.add_item("Milk"), uow.add_list("Groceries")
    engine.create_for_item(milk.id, [groceries.id], "alice")

    with pytest.raises(AlreadyAssociatedError) as exc:
        engine.create_for_item(milk.id, [groceries.id], "alice")

    assert isinstance(exc.value.__cause__, UniqueConstraintViolation)
    assert exc.value.category is ErrorCategory.CONFLICT
    assert uow.associations.count_for_list(groceries.id) == 1


def test_other_storage_failure_is_wrapped_with_cause(uow, engine):
    milk, groceries = uow.add_item("Milk"), uow.add_list("Groceries")
    failure = StorageFailure("lrm_list_item.create_many", "connection lost")
    uow.associations.failures["create_many"] = failure

    with pytest.raises(UnanticipatedStorageError) as exc:
        engine.create_for_item(milk.id, [groceries.id], "alice")

    assert exc.value.__cause__ is failure
    assert exc.value.operation == "lrm_list_item.create_many"


def test_fewer_created_rows_than_requested_is_a_mismatch(uow, engine):
    milk = uow.add_item("Milk")
    a, b = uow.add_list("A"), uow.add_list("B")
    uow.associations.forced["create_many"] = [
        CreatedPair(a.succinct(), milk.succinct(), "alice", "alice"),
    ]

    with pytest.raises(AssociationCountMismatchError) as exc:
        engine.create_for_item(milk.id, [a.id, b.id], "alice")

    assert (exc.value.requested, exc.value.created) == (2, 1)


def test_cross_owner_pair_from_storage_is_rejected(uow, engine):
    milk = uow.add_item("Milk")
    groceries = uow.add_list("Groceries")
    uow.associations.forced["create_many"] = [
        CreatedPair(groceries.succinct(), milk.succinct(), "alice", "mallory"),
    ]

    with pytest.raises(OwnershipMismatchError):
        engine.create_for_item(milk.id, [groceries.id], "alice")


# --- Delete one ---------------------------------------------------------------

def _linked(uow):
    milk, groceries = uow.add_item("Milk"), uow.add_list("Groceries")
    uow.associations.link(groceries.id, milk.id)
    return milk, groceries


def test_delete_one_returns_names(uow, engine):
    milk, groceries = _linked(uow)

    deleted = engine.delete_one(milk.id, groceries.id, "alice")

    assert (deleted.item_name, deleted.list_name) == ("Milk", "Groceries")
    assert uow.associations.find_one(groceries.id, milk.id) is None


def test_delete_one_without_association(uow, engine):
    milk, groceries = uow.add_item("Milk"), uow.add_list("Groceries")
    with pytest.raises(AssociationNotFoundError):
        engine.delete_one(milk.id, groceries.id, "alice")


def test_delete_one_checks_item_then_list(uow, engine):
    groceries = uow.add_list("Groceries")
    with pytest.raises(ItemNotFoundError):
        engine.delete_one(uuid4(), groceries.id, "alice")
    milk = uow.add_item("Milk")
    with pytest.raises(ListNotFoundError):
        engine.delete_one(milk.id, uuid4(), "alice")


def test_delete_one_lost_to_concurrent_delete_reports_not_found(uow, engine):
    milk, groceries = _linked(uow)
    uow.associations.hooks["delete_one"] = (
        lambda: uow.associations.rows.pop((groceries.id, milk.id))
    )

    with pytest.raises(AssociationNotFoundError):
        engine.delete_one(milk.id, groceries.id, "alice")


def test_delete_one_affecting_nothing_while_row_remains_is_inconsistent(uow, engine):
    milk, groceries = _linked(uow)
    uow.associations.forced["delete_one"] = 0

    with pytest.raises(InconsistentStateError):
        engine.delete_one(milk.id, groceries.id, "alice")


def test_delete_one_affecting_many_rows_is_fatal(uow, engine):
    milk, groceries = _linked(uow)
    uow.associations.forced["delete_one"] = 2

    with pytest.raises(MultipleAssociationsError) as exc:
        engine.delete_one(milk.id, groceries.id, "alice")

    assert exc.value.affected == 2


def test_delete_one_storage_failure_is_wrapped(uow, engine):
    milk, groceries = _linked(uow)
    uow.associations.failures["delete_one"] = StorageFailure("lrm_list_item.delete_one")

    with pytest.raises(UnanticipatedStorageError) as exc:
        engine.delete_one(milk.id, groceries.id, "alice")

    assert isinstance(exc.value.__cause__, StorageFailure)


def _lists_ignoring_owner(uow):
    uow.lists.find_by_owner_and_id = lambda id, owner: uow.lists.rows.get(id)
    return uow.add_list("Garage", owner="bob")


def test_delete_one_on_list_of_another_owner_is_rejected(uow, engine):
    milk = uow.add_item("Milk")
    garage = _lists_ignoring_owner(uow)
    uow.associations.link(garage.id, milk.id)

    with pytest.raises(OwnershipMismatchError):
        engine.delete_one(milk.id, garage.id, "alice")

    assert "delete_one" not in uow.associations.calls
    assert uow.associations.count_for_list(garage.id) == 1


# --- Bulk delete / purge ------------------------------------------------------

def test_delete_all_for_list_removes_only_that_list(uow, engine):
    milk, eggs = uow.add_item("Milk"), uow.add_item("Eggs")
    groceries, pantry = uow.add_list("Groceries"), uow.add_list("Pantry")
    uow.associations.link(groceries.id, milk.id)
    uow.associations.link(groceries.id, eggs.id)
    uow.associations.link(pantry.id, milk.id)

    deleted = engine.delete_all_for_list(groceries.id, "alice")

    assert (deleted.component_name, deleted.deleted_count) == ("Groceries", 2)
    assert uow.associations.count_for_list(groceries.id) == 0
    assert uow.associations.count_for_list(pantry.id) == 1


def test_delete_all_for_item_with_no_associations_is_fine(uow, engine):
    milk = uow.add_item("Milk")
    deleted = engine.delete_all_for_item(milk.id, "alice")
    assert deleted.deleted_count == 0


def test_delete_all_for_foreign_list_is_not_found(uow, engine):
    groceries = uow.add_list("Groceries", owner="bob")
    with pytest.raises(ListNotFoundError):
        engine.delete_all_for_list(groceries.id, "alice")


def test_purge_all_ignores_owner(uow, engine):
    a_item, a_list = uow.add_item("Milk"), uow.add_list("Groceries")
    b_item, b_list = uow.add_item("Eggs", "bob"), uow.add_list("Pantry", "bob")
    uow.associations.link(a_list.id, a_item.id)
    uow.associations.link(b_list.id, b_item.id)

    assert engine.purge_all() == 2
    assert engine.count_all() == 0


# --- Move ---------------------------------------------------------------------

def test_move_item_to_another_list(uow, engine):
    milk, groceries = _linked(uow)
    pantry = uow.add_list("Pantry")

    moved = engine.move_item(milk.id, groceries.id, pantry.id, "alice")

    assert (moved.item_name, moved.current_list_name, moved.destination_list_name) == (
        "Milk", "Groceries", "Pantry",
    )
    assert uow.associations.count_for_list(groceries.id) == 0
    assert uow.associations.count_for_list(pantry.id) == 1


def test_move_there_and_back_restores_the_pair(uow, engine):
    milk, groceries = _linked(uow)
    pantry = uow.add_list("Pantry")

    engine.move_item(milk.id, groceries.id, pantry.id, "alice")
    engine.move_item(milk.id, pantry.id, groceries.id, "alice")

    assert set(uow.associations.rows) == {(groceries.id, milk.id)}


def test_move_onto_same_list_is_a_no_op(uow, engine):
    milk, groceries = _linked(uow)

    moved = engine.move_item(milk.id, groceries.id, groceries.id, "alice")

    assert moved.current_list_name == moved.destination_list_name == "Groceries"
    assert "update_list_id" not in uow.associations.calls
    assert uow.associations.count_for_list(groceries.id) == 1


def test_move_to_missing_destination_mutates_nothing(uow, engine):
    milk, groceries = _linked(uow)

    with pytest.raises(ListNotFoundError):
        engine.move_item(milk.id, groceries.id, uuid4(), "alice")

    assert "update_list_id" not in uow.associations.calls


def test_move_onto_list_of_another_owner_is_rejected(uow, engine):
    milk, groceries = _linked(uow)
    garage = _lists_ignoring_owner(uow)

    with pytest.raises(OwnershipMismatchError):
        engine.move_item(milk.id, groceries.id, garage.id, "alice")

    assert "update_list_id" not in uow.associations.calls
    assert uow.associations.count_for_list(garage.id) == 0


def test_no_op_move_on_list_of_another_owner_is_rejected(uow, engine):
    milk = uow.add_item("Milk")
    garage = _lists_ignoring_owner(uow)

    with pytest.raises(OwnershipMismatchError):
        engine.move_item(milk.id, garage.id, garage.id, "alice")

    assert "find_one" not in uow.associations.calls


def test_move_without_association(uow, engine):
    milk = uow.add_item("Milk")
    groceries, pantry = uow.add_list("Groceries"), uow.add_list("Pantry")
    with pytest.raises(AssociationNotFoundError):
        engine.move_item(milk.id, groceries.id, pantry.id, "alice")


def test_move_onto_list_already_holding_item_is_a_conflict(uow, engine):
    milk, groceries = _linked(uow)
    pantry = uow.add_list("Pantry")
    uow.associations.link(pantry.id, milk.id)

    with pytest.raises(AssociationMoveError) as exc:
        engine.move_item(milk.id, groceries.id, pantry.id, "alice")

    assert exc.value.category is ErrorCategory.CONFLICT
    assert isinstance(exc.value.__cause__, UniqueConstraintViolation)


def test_move_storage_failure_is_a_database_move_error(uow, engine):
    milk, groceries = _linked(uow)
    pantry = uow.add_list("Pantry")
    failure = StorageFailure("lrm_list_item.update_list_id")
    uow.associations.failures["update_list_id"] = failure

    with pytest.raises(AssociationMoveError) as exc:
        engine.move_item(milk.id, groceries.id, pantry.id, "alice")

    assert exc.value.category is ErrorCategory.DATABASE
    assert exc.value.__cause__ is failure


def test_move_affecting_no_rows_is_a_move_error(uow, engine):
    milk, groceries = _linked(uow)
    pantry = uow.add_list("Pantry")
    uow.associations.forced["update_list_id"] = 0

    with pytest.raises(AssociationMoveError):
        engine.move_item(milk.id, groceries.id, pantry.id, "alice")


# --- Count --------------------------------------------------------------------

def test_counts_match_rows(uow, engine):
    milk, groceries = _linked(uow)
    assert engine.count_for_list(groceries.id, "alice") == 1
    assert engine.count_for_item(milk.id, "alice") == 1


def test_count_for_missing_item_raises(uow, engine):
    with pytest.raises(ItemNotFoundError):
        engine.count_for_item(uuid4(), "alice")
    assert "count_for_item" not in uow.associations.calls


def test_resolve_returns_entity(uow, engine):
    groceries = uow.add_list("Groceries")
    assert engine.resolve_list(groceries.id, "alice").succinct() == Succinct(
        ComponentType.LIST, groceries.id, "Groceries",
    )
