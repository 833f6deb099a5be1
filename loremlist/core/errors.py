"""Error Hierarchy - typed, categorized exceptions for every loremlist failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Not-found and conflict errors are recoverable by the caller; invariant violations
      and storage failures are critical
    - Wrapping always chains the cause (raise ... from cause)
    - to_response() produces a transport-neutral envelope; HTTP mapping belongs to the caller

Design Decisions:
    - Single hierarchy with LoremListError base: one handler can catch all domain failures
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - supplemental carries structured data (missing ids, names) for the response layer
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable
from datetime import datetime, timezone
from uuid import UUID


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    owner: str | None = None
    list_id: UUID | None = None
    item_id: UUID | None = None
    operation: str | None = None


class LoremListError(Exception):
    """Base exception for all loremlist errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        supplemental: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.supplemental = supplemental or {}

    @property
    def recoverable(self) -> bool:
        return self.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING)

    def to_response(self) -> dict:
        """Convert to a structured error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "recoverable": self.recoverable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "owner": self.context.owner,
                    "list_id": _str_or_none(self.context.list_id),
                    "item_id": _str_or_none(self.context.item_id),
                    "operation": self.context.operation,
                },
                "supplemental": self.supplemental,
            }
        }


def _str_or_none(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


def _sorted_ids(ids: Iterable[UUID]) -> list[UUID]:
    return sorted(set(ids), key=str)


# ─── Not Found (recoverable) ────────────────────────────────────

class EntityNotFoundError(LoremListError):
    """One or more entities are absent or not owned by the caller."""

    entity_name = "Entity"
    error_code = "ENTITY_NOT_FOUND"

    def __init__(
        self,
        ids: UUID | Iterable[UUID],
        message: str | None = None,
        context: ErrorContext | None = None,
    ):
        self.ids = _sorted_ids([ids] if isinstance(ids, UUID) else ids)
        super().__init__(
            message or self.default_message(self.ids),
            self.error_code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context,
            supplemental={"not_found": [str(i) for i in self.ids]},
        )

    @classmethod
    def default_message(cls, ids: list[UUID]) -> str:
        if len(ids) > 1:
            return f"{cls.entity_name}s ({len(ids)}) could not be found."
        if ids:
            return f"{cls.entity_name} id {ids[0]} could not be found."
        return f"{cls.entity_name} could not be found."


class ItemNotFoundError(EntityNotFoundError):
    entity_name = "Item"
    error_code = "ITEM_NOT_FOUND"


class ListNotFoundError(EntityNotFoundError):
    entity_name = "List"
    error_code = "LIST_NOT_FOUND"


class AssociationNotFoundError(LoremListError):
    """The (list, item) pair is not associated."""
    def __init__(
        self, item_id: UUID, list_id: UUID, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Item id {item_id} is not associated with list id {list_id}.",
            "ASSOCIATION_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context,
            supplemental={"item_id": str(item_id), "list_id": str(list_id)},
        )
        self.item_id = item_id
        self.list_id = list_id


# ─── Conflict / Validation / Business Rule ───────────────────────

class AlreadyAssociatedError(LoremListError):
    """A requested association already exists (uniqueness violation)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ALREADY_ASSOCIATED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context,
        )


class ComponentValidationError(LoremListError):
    """Operation input failed validation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, supplemental={"field": field},
        )
        self.field = field


class ComponentHasAssociationsError(LoremListError):
    """A list or item cannot be deleted while it still has associations."""
    def __init__(
        self,
        message: str,
        names: list[str],
        associated_names: list[str],
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "COMPONENT_HAS_ASSOCIATIONS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context,
            supplemental={"names": names, "associated_names": associated_names},
        )
        self.names = names
        self.associated_names = associated_names


class AssociationMoveError(LoremListError):
    """The association update step of a move failed."""
    def __init__(
        self, message: str, conflict: bool = False, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "ASSOCIATION_MOVE_FAILED",
            ErrorCategory.CONFLICT if conflict else ErrorCategory.DATABASE,
            ErrorSeverity.ERROR, context,
        )


# ─── Invariant Violations (critical) ─────────────────────────────

class AssociationCountMismatchError(LoremListError):
    """Bulk creation reported a different number of rows than requested."""
    def __init__(self, requested: int, created: int, context: ErrorContext | None = None):
        super().__init__(
            "Mismatch in created associations count "
            f"(created = {created} / requested = {requested})",
            "ASSOCIATION_COUNT_MISMATCH", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context,
            supplemental={"requested": requested, "created": created},
        )
        self.requested = requested
        self.created = created


class OwnershipMismatchError(LoremListError):
    """A list and an item with different owners ended up associated."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "OWNERSHIP_MISMATCH", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context,
        )


class InconsistentStateError(LoremListError):
    """Entities were found during validation but the mutation affected no rows."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INCONSISTENT_STATE", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context,
        )


class MultipleAssociationsError(LoremListError):
    """A single-pair mutation affected more than one row."""
    def __init__(self, message: str, affected: int, context: ErrorContext | None = None):
        super().__init__(
            message, "MULTIPLE_ASSOCIATIONS", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, supplemental={"affected": affected},
        )
        self.affected = affected


# ─── Infrastructure (critical) ──────────────────────────────────

class UnanticipatedStorageError(LoremListError):
    """Storage failed in a way the domain does not translate further."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"{message}: storage operation '{operation}' failed.",
            "STORAGE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
