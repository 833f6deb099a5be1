"""Service test fixtures - every service over one in-memory SQLite database.

Invariants:
    - Services share the root uow_factory, so each test sees one fresh schema
    - Seed helpers go through the services themselves (no direct ORM writes)
"""

import pytest

from loremlist.schemas.component import ItemCreate, ListCreate
from loremlist.services.association_service import AssociationService
from loremlist.services.item_service import ItemService
from loremlist.services.list_item_service import ListItemService
from loremlist.services.list_service import ListService
from loremlist.services.maintenance_service import MaintenanceService


@pytest.fixture
def association_service(uow_factory):
    return AssociationService(uow_factory)


@pytest.fixture
def list_service(uow_factory):
    return ListService(uow_factory)


@pytest.fixture
def item_service(uow_factory):
    return ItemService(uow_factory)


@pytest.fixture
def list_item_service(uow_factory):
    return ListItemService(uow_factory)


@pytest.fixture
def maintenance_service(uow_factory):
    return MaintenanceService(uow_factory)


@pytest.fixture
def make_list(list_service):
    def _make(name, owner="alice", public=False):
        return list_service.create(ListCreate(name=name, public=public), owner).content
    return _make


@pytest.fixture
def make_item(item_service):
    def _make(name, owner="alice"):
        return item_service.create(ItemCreate(name=name), owner).content
    return _make
