"""Component Service - owner-scoped CRUD shared by the list and item services.

Invariants:
    - Every read and write is scoped to the owner; foreign components are NotFound
    - Patches write only fields explicitly set AND different from the stored value
    - A component with associations is deleted only when the caller asks for the
      associations to go too (ComponentHasAssociationsError otherwise)
    - Row counts that contradict a just-completed read raise InconsistentStateError
    - delete_by_owner reports one associated name per removed association, so a
      component shared by several deleted ones is named once for each

Design Decisions:
    - One base class parametrised by ComponentType: list and item behave identically
      apart from their fields and wording
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from uuid import UUID

from loremlist.core.association_engine import AssociationEngine
from loremlist.core.domain_types import ComponentType
from loremlist.core.entities import ComponentsDeleted, ServiceResponse, Succinct
from loremlist.core.errors import (
    ComponentHasAssociationsError, ErrorContext, InconsistentStateError,
)
from loremlist.core.format_messages import (
    format_component_count, format_created, format_patch_result,
    format_retrieved, format_retrieved_many,
)
from loremlist.services.association_service import engine_for
from loremlist.services.transaction import UnitOfWorkFactory, transaction

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ComponentService:
    """Base for ListService and ItemService."""

    kind: ComponentType

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    # ─── Hooks ───────────────────────────────────────────────────

    def _store(self, uow):
        raise NotImplementedError

    def _resolve(self, engine: AssociationEngine, id: UUID, owner: str):
        raise NotImplementedError

    def _associated(self, uow, id: UUID) -> list[Succinct]:
        raise NotImplementedError

    def _remove_associations(self, engine: AssociationEngine, id: UUID, owner: str) -> int:
        raise NotImplementedError

    def _deleted_message(self, name: str, associated_count: int) -> str:
        raise NotImplementedError

    def _all_deleted_message(self, count: int, associated_count: int) -> str:
        raise NotImplementedError

    # ─── Create / Read ───────────────────────────────────────────

    def _insert(self, component, owner: str):
        with transaction(self._uow_factory, f"create_{self.kind.value}", owner) as uow:
            self._store(uow).insert(component)
        logger.info("Component created",
            extra={"owner": owner, "operation": f"create_{self.kind.value}"})
        return ServiceResponse(component, format_created(self.kind, component.name))

    def find_by_owner_and_id(self, id: UUID, owner: str) -> ServiceResponse:
        with transaction(self._uow_factory, f"find_{self.kind.value}", owner) as uow:
            component = self._resolve(engine_for(uow), id, owner)
        return ServiceResponse(component, format_retrieved(self.kind, component.name))

    def find_by_owner(self, owner: str) -> ServiceResponse[list]:
        with transaction(self._uow_factory, f"find_{self.kind.value}s", owner) as uow:
            components = self._store(uow).find_by_owner(owner)
        return ServiceResponse(
            components, format_retrieved_many(self.kind, len(components)),
        )

    def _find_unassociated(self, owner: str) -> ServiceResponse[list]:
        with transaction(self._uow_factory, f"find_{self.kind.value}s", owner) as uow:
            components = self._store(uow).find_by_owner_having_no_associations(owner)
        return ServiceResponse(
            components, format_retrieved_many(self.kind, len(components)),
        )

    def _find_associated(self, id: UUID, owner: str) -> ServiceResponse[list[Succinct]]:
        with transaction(self._uow_factory, f"find_{self.kind.value}", owner) as uow:
            self._resolve(engine_for(uow), id, owner)
            associated = self._associated(uow, id)
        return ServiceResponse(
            associated, format_retrieved_many(self.kind.invert(), len(associated)),
        )

    def count_by_owner(self, owner: str) -> ServiceResponse[int]:
        with transaction(self._uow_factory, f"count_{self.kind.value}s", owner) as uow:
            count = self._store(uow).count_by_owner(owner)
        return ServiceResponse(count, format_component_count(self.kind, count))

    # ─── Update ──────────────────────────────────────────────────

    def _patch(self, id: UUID, owner: str, changes: dict) -> ServiceResponse:
        operation = f"patch_{self.kind.value}"
        with transaction(self._uow_factory, operation, owner) as uow:
            current = self._resolve(engine_for(uow), id, owner)
            changed = {k: v for k, v in changes.items() if getattr(current, k) != v}
            if not changed:
                return ServiceResponse(
                    current, format_patch_result(self.kind, current.name, []),
                )
            patched = replace(current, **changed, updated=utc_now(), updater=owner)
            updated = self._store(uow).update(patched)
            if updated != 1:
                logger.error("Patch affected unexpected row count",
                    extra={"owner": owner, "operation": operation, "count": updated})
                raise InconsistentStateError(
                    f"{self.kind.value.capitalize()} id {id} could not be updated. "
                    f"{updated} records would have been updated rather than 1.",
                    context=ErrorContext(owner=owner, operation=operation),
                )
        logger.info("Component patched",
            extra={"owner": owner, "operation": operation, "count": len(changed)})
        return ServiceResponse(
            patched, format_patch_result(self.kind, patched.name, list(changed)),
        )

    # ─── Delete ──────────────────────────────────────────────────

    def _delete(
        self, id: UUID, owner: str, remove_associations: bool,
    ) -> ServiceResponse[ComponentsDeleted]:
        operation = f"delete_{self.kind.value}"
        ctx = ErrorContext(owner=owner, operation=operation)
        with transaction(self._uow_factory, operation, owner) as uow:
            engine = engine_for(uow)
            component = self._resolve(engine, id, owner)
            associated_names = [s.name for s in self._associated(uow, id)]
            if associated_names and not remove_associations:
                other = self.kind.invert()
                raise ComponentHasAssociationsError(
                    f"{self.kind.value.capitalize()} '{component.name}' is associated "
                    f"with {len(associated_names)} "
                    f"{other.plural(len(associated_names))}. Remove the "
                    f"associations first, or request their removal.",
                    names=[component.name],
                    associated_names=associated_names,
                    context=ctx,
                )
            if associated_names:
                self._remove_associations(engine, id, owner)
            deleted = self._store(uow).delete(id)
            if deleted != 1:
                logger.error("Delete affected unexpected row count",
                    extra={"owner": owner, "operation": operation, "count": deleted})
                raise InconsistentStateError(
                    f"{self.kind.value.capitalize()} id {id} could not be deleted. "
                    f"{deleted} records would have been deleted rather than 1.",
                    context=ctx,
                )
        logger.info("Component deleted",
            extra={"owner": owner, "operation": operation,
                   "count": len(associated_names)})
        return ServiceResponse(
            ComponentsDeleted(names=[component.name], associated_names=associated_names),
            self._deleted_message(component.name, len(associated_names)),
        )

    def delete_by_owner(self, owner: str) -> ServiceResponse[ComponentsDeleted]:
        """Delete every component of the owner together with its associations."""
        operation = f"delete_{self.kind.value}s"
        with transaction(self._uow_factory, operation, owner) as uow:
            store = self._store(uow)
            components = store.find_by_owner(owner)
            engine = engine_for(uow)
            associated: list[Succinct] = []
            for component in components:
                linked = self._associated(uow, component.id)
                if linked:
                    associated.extend(linked)
                    self._remove_associations(engine, component.id, owner)
            deleted = store.delete_by_owner(owner)
            if deleted != len(components):
                logger.error("Bulk delete affected unexpected row count",
                    extra={"owner": owner, "operation": operation, "count": deleted})
                raise InconsistentStateError(
                    f"Deleted {deleted} {self.kind.plural(deleted)} but expected "
                    f"{len(components)}.",
                    context=ErrorContext(owner=owner, operation=operation),
                )
        result = ComponentsDeleted(
            names=sorted(c.name for c in components),
            associated_names=sorted(s.name for s in associated),
        )
        logger.info("All components of owner deleted",
            extra={"owner": owner, "operation": operation, "count": deleted})
        return ServiceResponse(
            result,
            self._all_deleted_message(len(result.names), len(result.associated_names)),
        )
