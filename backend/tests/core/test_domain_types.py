"""Domain Types: verifies constants and closed enum values.

Tests:
    - Capacity and time constants
    - SortMode.parse falls back to NEWEST for unknown values
    - Direction values are the signed step
"""

from temptabs.core.domain_types import (
    MAX_ITEMS, MS_PER_HOUR, PRESET_LADDER_HOURS, Direction, ExpiryChoiceKind,
    SortMode, StoreKey,
)


def test_constants():
    assert MAX_ITEMS == 500
    assert MS_PER_HOUR == 3_600_000
    assert PRESET_LADDER_HOURS == (1, 2, 6, 12, 24, 48, 72, 168)


def test_sort_mode_has_six_modes():
    assert {m.value for m in SortMode} == {"newest", "oldest", "title", "domain", "url", "manual"}


def test_sort_mode_parse_falls_back_to_newest():
    assert SortMode.parse("manual") is SortMode.MANUAL
    assert SortMode.parse("alphabetical") is SortMode.NEWEST
    assert SortMode.parse(None) is SortMode.NEWEST


def test_direction_values():
    assert Direction.UP.value == -1
    assert Direction.DOWN.value == 1
    assert Direction(-1) is Direction.UP


def test_store_keys_match_persisted_names():
    assert StoreKey.MANUAL_ORDER.value == "manualOrder"
    assert StoreKey.HIDE_EXPIRED.value == "hideExpired"
    assert ExpiryChoiceKind.NEVER.value == "never"
