"""Domain Types - enums and field limits shared across the codebase.

Invariants:
    - ComponentType.invert() maps LIST <-> ITEM, ASSOCIATION -> ASSOCIATION
    - All valid kinds encoded as Enums, no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class ComponentType(str, Enum):
    """The kinds of component an operation can be anchored on."""
    ASSOCIATION = "association"
    ITEM = "item"
    LIST = "list"

    def invert(self) -> "ComponentType":
        """The component on the other side of an association."""
        if self is ComponentType.ITEM:
            return ComponentType.LIST
        if self is ComponentType.LIST:
            return ComponentType.ITEM
        return ComponentType.ASSOCIATION

    def plural(self, count: int) -> str:
        """Noun for `count` components of this kind: 'list' or 'lists'."""
        return self.value if count == 1 else f"{self.value}s"


# ─── Field Limits ────────────────────────────────────────────────

NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 2048
