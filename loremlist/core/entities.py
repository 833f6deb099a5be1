"""Entity Model - value types for lists, items, associations and operation results.

Invariants:
    - Entities hold ids, never live references to each other (no cyclic graphs)
    - Association is addressed by (list_id, item_id); quantity and suppression live here,
      not on the Item, because they differ per list
    - Succinct is a tagged value (kind, id, name), not a class hierarchy
    - All types are frozen: changes go through dataclasses.replace()

Design Decisions:
    - Frozen dataclasses over ORM objects: core stays free of SQLAlchemy
    - Cross-entity traversal happens only through the ports (core/repository_protocols.py)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from loremlist.core.domain_types import ComponentType

T = TypeVar("T")


@dataclass(frozen=True)
class Succinct:
    """Minimal (kind, id, name) projection of a List or Item."""
    kind: ComponentType
    id: UUID
    name: str


@dataclass(frozen=True)
class LrmList:
    id: UUID
    name: str
    owner: str
    description: str | None = None
    public: bool = False
    created: datetime | None = None
    creator: str | None = None
    updated: datetime | None = None
    updater: str | None = None

    def succinct(self) -> Succinct:
        return Succinct(kind=ComponentType.LIST, id=self.id, name=self.name)


@dataclass(frozen=True)
class LrmItem:
    id: UUID
    name: str
    owner: str
    description: str | None = None
    created: datetime | None = None
    creator: str | None = None
    updated: datetime | None = None
    updater: str | None = None

    def succinct(self) -> Succinct:
        return Succinct(kind=ComponentType.ITEM, id=self.id, name=self.name)


@dataclass(frozen=True)
class Association:
    """The join record between one list and one item."""
    list_id: UUID
    item_id: UUID
    quantity: int = 0
    is_suppressed: bool = False


@dataclass(frozen=True)
class ListItem:
    """An item as seen from inside one list: item fields plus the association's fields."""
    id: UUID
    list_id: UUID
    name: str
    owner: str
    description: str | None = None
    quantity: int = 0
    is_suppressed: bool = False
    created: datetime | None = None
    creator: str | None = None
    updated: datetime | None = None
    updater: str | None = None


@dataclass(frozen=True)
class CreatedPair:
    """One association row as reported back by bulk creation."""
    list: Succinct
    item: Succinct
    list_owner: str
    item_owner: str


# ─── Operation Results ───────────────────────────────────────────

@dataclass(frozen=True)
class AssociationCreated:
    component_name: str
    associated_components: list[Succinct]


@dataclass(frozen=True)
class AssociationDeleted:
    item_name: str
    list_name: str


@dataclass(frozen=True)
class AssociationsDeleted:
    component_name: str
    deleted_count: int


@dataclass(frozen=True)
class AssociationMoved:
    item_name: str
    current_list_name: str
    destination_list_name: str


@dataclass(frozen=True)
class ComponentsDeleted:
    """Names of deleted lists (or items) and of the components they were associated with."""
    names: list[str] = field(default_factory=list)
    associated_names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PurgeCounts:
    association_deleted_count: int
    item_deleted_count: int
    list_deleted_count: int


@dataclass(frozen=True)
class ServiceResponse(Generic[T]):
    """Structured service result: content plus a human-readable message."""
    content: T
    message: str
