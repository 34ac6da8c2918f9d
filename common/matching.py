"""Entry lookup shared by the cart and wishlist ledgers.

Ledger entries can be addressed two ways: by the product reference they were
created for, or by their own ledger-assigned ``entry_id``. Older clients use
either, so every lookup tries both.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class ByReference:
    value: str

    def matches(self, entry) -> bool:
        return str(entry.product_ref) == self.value


@dataclass(frozen=True)
class ByEntryId:
    value: str

    def matches(self, entry) -> bool:
        return str(entry.entry_id) == self.value


Lookup = Union[ByReference, ByEntryId]


def lookups_for(ref) -> tuple[Lookup, ...]:
    """Return the lookups a raw client reference is tried against."""

    value = str(ref)
    return (ByReference(value), ByEntryId(value))


def find_entry(items: Iterable[T], ref) -> Optional[T]:
    """Return the first entry matching ``ref`` by product reference or entry id.

    Comparison is exact string identity; ordering follows ``items``.
    """

    lookups = lookups_for(ref)
    for entry in items:
        if any(lookup.matches(entry) for lookup in lookups):
            return entry
    return None


def contains(items: Iterable, ref) -> bool:
    return find_entry(items, ref) is not None
