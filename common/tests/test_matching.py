import uuid
from types import SimpleNamespace

from common.matching import ByEntryId, ByReference, contains, find_entry, lookups_for


def _entry(product_ref, entry_id=None):
    return SimpleNamespace(product_ref=product_ref, entry_id=entry_id or uuid.uuid4())


def test_lookups_cover_both_addressing_schemes():
    assert lookups_for(42) == (ByReference("42"), ByEntryId("42"))


def test_find_by_reference_compares_as_strings():
    entries = [_entry("7"), _entry("mock-1")]
    assert find_entry(entries, 7) is entries[0]
    assert find_entry(entries, "mock-1") is entries[1]


def test_find_by_entry_id():
    entry_id = uuid.uuid4()
    entries = [_entry("1"), _entry("2", entry_id)]
    assert find_entry(entries, str(entry_id)) is entries[1]


def test_first_match_wins():
    first = _entry("5")
    second = _entry("5")
    assert find_entry([first, second], "5") is first


def test_no_case_folding_or_partial_match():
    entries = [_entry("Mock-A")]
    assert find_entry(entries, "mock-a") is None
    assert not contains(entries, "Mock")
    assert contains(entries, "Mock-A")
