"""Store Records: lenient decoding and camelCase encoding of persisted values.

Invariants:
    - Decoding never raises; malformed values fall back to defaults
    - Items without a string id or url are dropped; duplicate ids keep the first
    - expiresAt / expiryPreset are omitted from encoded items when absent
    - hideExpired decodes true unless stored exactly False
"""

from temptabs.core.domain_types import SortMode
from temptabs.core.item import Item
from temptabs.core.records import (
    ALL_KEYS, StoreSnapshot, UserSettings, decode_item, decode_items,
    decode_manual_order, decode_settings, decode_snapshot, decode_view_prefs,
    encode_item, encode_settings, encode_view_prefs, merge_settings,
    settings_need_defaults,
)
from temptabs.core.view import ViewPrefs


# -- Items ---------------------------------------------------------------------

def test_decode_item_applies_fallbacks():
    item = decode_item({"id": "a", "url": "https://www.x.org/p", "expiresAt": -5})
    assert item == Item(
        id="a", url="https://www.x.org/p", title="https://www.x.org/p",
        domain="x.org", added_at=0, expires_at=None, expiry_preset=None,
    )


def test_decode_item_drops_records_without_id_or_url():
    assert decode_item({"url": "https://x.org"}) is None
    assert decode_item({"id": "a"}) is None
    assert decode_item({"id": 3, "url": "https://x.org"}) is None
    assert decode_item("junk") is None


def test_decode_items_dedupes_and_skips_garbage():
    raw = [
        {"id": "a", "url": "https://a.org", "title": "first"},
        {"id": "a", "url": "https://a.org", "title": "second"},
        None,
        {"id": "b", "url": "https://b.org", "addedAt": 5, "expiresAt": 10, "expiryPreset": "1"},
    ]
    items = decode_items(raw)
    assert [i.id for i in items] == ["a", "b"]
    assert items[0].title == "first"
    assert items[1].expires_at == 10
    assert decode_items({"not": "a list"}) == []


def test_encode_item_omits_absent_expiry_fields():
    pinned = Item(id="a", url="u", title="t", domain="", added_at=1)
    assert encode_item(pinned) == {
        "id": "a", "url": "u", "title": "t", "domain": "", "addedAt": 1,
    }
    timed = Item(id="a", url="u", title="t", domain="", added_at=1, expires_at=9, expiry_preset="default")
    assert encode_item(timed)["expiresAt"] == 9
    assert encode_item(timed)["expiryPreset"] == "default"


# -- Settings ------------------------------------------------------------------

def test_decode_settings_defaults():
    assert decode_settings(None) == UserSettings(retention_hours=24, popup_width=400)
    assert decode_settings({"retentionHours": "x"}, 12).retention_hours == 12
    assert decode_settings({"retentionHours": 6, "popupWidth": 500}) == UserSettings(6, 500)


def test_merge_settings_is_partial():
    current = UserSettings(retention_hours=24, popup_width=400)
    assert merge_settings(current, retention_hours=2) == UserSettings(2, 400)
    assert merge_settings(current, popup_width=600) == UserSettings(24, 600)
    assert merge_settings(current, retention_hours=-1) == current


def test_retention_above_max_span_falls_back():
    assert decode_settings({"retentionHours": 1e308}, 12).retention_hours == 12
    current = UserSettings(retention_hours=24, popup_width=400)
    assert merge_settings(current, retention_hours=1e308) == current


def test_encode_settings_uses_camel_case():
    assert encode_settings(UserSettings(3, 350)) == {"retentionHours": 3, "popupWidth": 350}


def test_settings_need_defaults():
    assert settings_need_defaults(None)
    assert settings_need_defaults({"popupWidth": 400})
    assert settings_need_defaults({"retentionHours": True})
    assert not settings_need_defaults({"retentionHours": 24})


# -- Order & prefs -------------------------------------------------------------

def test_decode_manual_order_keeps_strings_only():
    assert decode_manual_order(["a", 1, None, "", "b"]) == ["a", "b"]
    assert decode_manual_order("a,b") == []


def test_decode_view_prefs():
    assert decode_view_prefs(None, None) == ViewPrefs(SortMode.NEWEST, True)
    assert decode_view_prefs("bogus", "false") == ViewPrefs(SortMode.NEWEST, True)
    assert decode_view_prefs("manual", False) == ViewPrefs(SortMode.MANUAL, False)


def test_encode_view_prefs():
    assert encode_view_prefs(ViewPrefs(SortMode.TITLE, False)) == {
        "sortMode": "title", "hideExpired": False,
    }


# -- Snapshot ------------------------------------------------------------------

def test_empty_record_decodes_to_defaults():
    assert decode_snapshot({}) == StoreSnapshot()
    assert set(ALL_KEYS) == {"settings", "items", "manualOrder", "sortMode", "hideExpired"}
