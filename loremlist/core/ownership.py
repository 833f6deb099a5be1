"""Ownership Consistency - pure predicates over entity owners.

Invariants:
    - Pure: no IO, no side effects, never raises
    - A predicate, not a validator: callers decide what a False result means
"""

from typing import Protocol

from loremlist.core.entities import CreatedPair


class Owned(Protocol):
    owner: str


def same_owner(a: Owned, b: Owned) -> bool:
    """True when both entities belong to one principal."""
    return a.owner == b.owner


def association_is_consistent(pair: CreatedPair) -> bool:
    """True when both sides of a created association share one owner."""
    return pair.list_owner == pair.item_owner
