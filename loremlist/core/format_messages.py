"""Message Formatting - pure functions composing human-readable operation messages.

Invariants:
    - All functions are pure (no IO, no DB)
    - Singular phrasing when exactly one component is involved, counted plural otherwise
    - Names are quoted with single quotes; ids are never quoted
"""

from loremlist.core.domain_types import ComponentType
from loremlist.core.entities import AssociationCreated


def format_association_created(
    anchor: ComponentType, created: AssociationCreated,
) -> str:
    """'Assigned item 'Milk' to list 'Groceries'' or '... to 3 lists.'"""
    other = anchor.invert()
    components = created.associated_components
    prefix = f"Assigned {anchor.value} '{created.component_name}' to"
    if len(components) == 1:
        return f"{prefix} {other.value} '{components[0].name}'"
    return f"{prefix} {len(components)} {other.plural(len(components))}."


def format_association_deleted(item_name: str, list_name: str) -> str:
    return f"Removed item '{item_name}' from list '{list_name}'"


def format_item_removed_from_lists(item_name: str, count: int) -> str:
    return f"Removed '{item_name}' from {count} {ComponentType.LIST.plural(count)}."


def format_items_removed_from_list(list_name: str, count: int) -> str:
    return f"Removed {count} {ComponentType.ITEM.plural(count)} from list '{list_name}'"


def format_association_moved(
    item_name: str, current_list_name: str, destination_list_name: str,
) -> str:
    return (
        f"Moved item '{item_name}' from list '{current_list_name}' "
        f"to list '{destination_list_name}'"
    )


def format_association_count(anchor: ComponentType, count: int) -> str:
    """'List is associated with 1 item.'"""
    other = anchor.invert()
    return f"{anchor.value.capitalize()} is associated with {count} {other.plural(count)}."


def format_component_count(kind: ComponentType, count: int) -> str:
    """'1 list.' / '3 items.'"""
    return f"{count} {kind.plural(count)}."


def format_patch_result(
    kind: ComponentType, name: str, changed_fields: list[str],
) -> str:
    label = kind.value.capitalize()
    if not changed_fields:
        return f"{label} '{name}' not updated."
    return f"{label} '{name}' updated. Fields changed: {', '.join(changed_fields)}."


def format_list_deleted(list_name: str, associated_count: int) -> str:
    return (
        f"Deleted list '{list_name}', and disassociated {associated_count} "
        f"{ComponentType.ITEM.plural(associated_count)}."
    )


def format_item_deleted(item_name: str, associated_count: int) -> str:
    return (
        f"Deleted item '{item_name}', and removed it from {associated_count} "
        f"{ComponentType.LIST.plural(associated_count)}."
    )


def format_lists_deleted(list_count: int, associated_count: int) -> str:
    return (
        f"Deleted all ({list_count}) of your lists, and disassociated "
        f"{associated_count} {ComponentType.ITEM.plural(associated_count)}."
    )


def format_items_deleted(item_count: int, associated_count: int) -> str:
    return (
        f"Deleted all ({item_count}) of your items, and removed them from "
        f"{associated_count} {ComponentType.LIST.plural(associated_count)}."
    )


def format_purged(counts_by_kind: dict[ComponentType, int]) -> str:
    """'Purged 3 associations, 2 items, 1 list.'"""
    parts = [
        f"{count} {kind.plural(count)}" for kind, count in counts_by_kind.items()
    ]
    return f"Purged {', '.join(parts)}."


def format_created(kind: ComponentType, name: str) -> str:
    return f"Created {kind.value} '{name}'"


def format_list_item_created(item_name: str, list_name: str) -> str:
    return f"Created item '{item_name}' and assigned it to list '{list_name}'"


def format_retrieved(kind: ComponentType, name: str) -> str:
    return f"Retrieved {kind.value} '{name}'"


def format_retrieved_many(kind: ComponentType, count: int) -> str:
    """'Retrieved 3 lists.'"""
    return f"Retrieved {count} {kind.plural(count)}."
