"""TempTabs Service: read-compute-write transactions over the item store.

Invariants:
    - Every mutation re-reads the store; external writes are never overwritten
    - Unknown ids are silent no-ops
    - Default expiry stays anchored to added_at across settings changes
    - StoreError propagates unchanged
"""

import json

import pytest

from temptabs.core.domain_types import MS_PER_HOUR, Direction, SortMode
from temptabs.core.errors import StoreError
from temptabs.services.temptabs_service import TempTabsService

from tests.services.fakes import T0, FailingStore, FixedClock, SequentialIds


# -- Adding --------------------------------------------------------------------

async def test_add_item_persists_camel_case_record(service, store):
    item = await service.add_item("https://www.example.com/a", "Example")
    raw = await store.get(["items"])
    assert raw["items"] == [{
        "id": item.id,
        "url": "https://www.example.com/a",
        "title": "Example",
        "domain": "example.com",
        "addedAt": T0,
        "expiresAt": T0 + 24 * MS_PER_HOUR,
    }]


async def test_add_uses_stored_retention(service):
    await service.update_settings(retention_hours=2)
    item = await service.add_item("https://a.test")
    assert item.expires_at == T0 + 2 * MS_PER_HOUR


async def test_add_evicts_oldest_at_capacity(store, clock, ids):
    service = TempTabsService(store, clock, ids, max_items=2)
    first = await service.add_item("https://1.test")
    clock.advance(1)
    await service.add_item("https://2.test")
    clock.advance(1)
    await service.add_item("https://3.test")
    view = await service.get_view()
    assert len(view.visible_items) == 2
    assert first.id not in view.visible_ids


async def test_each_mutation_rereads_the_store(service, store):
    await service.add_item("https://a.test")
    raw = await store.get(["items"])
    raw["items"].append({"id": "external", "url": "https://ext.test", "addedAt": T0})
    await store.set(raw)

    await service.add_item("https://b.test")
    ids = [record["id"] for record in (await store.get(["items"]))["items"]]
    assert "external" in ids
    assert len(ids) == 3


async def test_add_page_prefers_page_url(service):
    item = await service.add_page("https://page.test", "https://tab.test", "Tab title")
    assert item.url == "https://page.test"
    assert item.title == "Tab title"
    assert await service.add_page(None, None) is None


async def test_add_link_uses_link_text_as_title(service):
    item = await service.add_link("https://l.test", "Some link")
    assert item.title == "Some link"
    fallback = await service.add_link("https://m.test")
    assert fallback.title == "https://m.test"
    assert await service.add_link("") is None


# -- Editing -------------------------------------------------------------------

async def test_remove_item(service):
    item = await service.add_item("https://a.test")
    assert await service.remove_item(item.id) is True
    assert await service.remove_item(item.id) is False
    assert (await service.get_view()).visible_items == ()


async def test_default_expiry_anchored_across_settings_change(service, clock):
    item = await service.add_item("https://a.test")
    await service.update_settings(retention_hours=48)
    stored = (await service.get_view()).visible_items[0]
    assert stored.expires_at == item.expires_at

    clock.advance(5 * MS_PER_HOUR)
    updated = await service.set_item_expiry(item.id, "default")
    assert updated.expires_at == T0 + 48 * MS_PER_HOUR
    assert updated.expiry_preset == "default"


async def test_set_expiry_never_pins(service, clock):
    item = await service.add_item("https://a.test")
    pinned = await service.set_item_expiry(item.id, "never")
    assert pinned.expires_at is None
    clock.advance(1000 * MS_PER_HOUR)
    assert await service.live_count() == 1


async def test_set_expiry_invalid_choice_is_noop(service, store):
    item = await service.add_item("https://a.test")
    before = await store.get(["items"])
    assert await service.set_item_expiry(item.id, "-4") == item
    assert await store.get(["items"]) == before


async def test_set_expiry_unknown_id_returns_none(service):
    assert await service.set_item_expiry("missing", "1") is None


async def test_rename_item(service):
    item = await service.add_item("https://a.test", "Old")
    renamed = await service.rename_item(item.id, "New")
    assert renamed.title == "New"
    assert renamed.domain == "a.test"
    assert await service.rename_item("missing", "x") is None


# -- Ordering ------------------------------------------------------------------

async def test_reorder_drag_persists_manual_order(service, store):
    a = await service.add_item("https://a.test")
    b = await service.add_item("https://b.test")
    order = await service.reorder_drag([a.id, b.id], b.id, a.id, False)
    assert order == [b.id, a.id]
    assert (await store.get(["manualOrder"]))["manualOrder"] == [b.id, a.id]


async def test_move_item_ignored_outside_manual_mode(service, store):
    a = await service.add_item("https://a.test")
    await service.add_item("https://b.test")
    assert await service.move_item(a.id, Direction.DOWN) == []
    assert await store.get(["manualOrder"]) == {}


async def test_move_item_seeds_from_displayed_order(service, clock):
    a = await service.add_item("https://a.test")
    clock.advance(1)
    b = await service.add_item("https://b.test")
    await service.set_view_prefs(sort_mode=SortMode.MANUAL)
    # empty manual order displays newest first: b, a
    order = await service.move_item(a.id, Direction.UP)
    assert order == [a.id, b.id]
    view = await service.get_view()
    assert view.visible_ids == [a.id, b.id]


# -- View & prefs --------------------------------------------------------------

async def test_item_hidden_after_expiry(store, ids):
    clock = FixedClock(0)
    service = TempTabsService(store, clock, ids)
    item = await service.add_item("https://a.test")
    assert item.expires_at == 86_400_000
    clock.now_ms = 86_400_001
    view = await service.get_view()
    assert view.visible_items == ()
    assert view.total_live_count == 0


async def test_set_view_prefs_is_partial(service):
    await service.set_view_prefs(sort_mode=SortMode.TITLE)
    prefs = await service.set_view_prefs(hide_expired=False)
    assert prefs.sort_mode is SortMode.TITLE
    assert prefs.hide_expired is False
    assert await service.get_view_prefs() == prefs


# -- Settings ------------------------------------------------------------------

async def test_ensure_defaults_writes_once(service, store):
    settings = await service.ensure_defaults()
    assert settings.retention_hours == 24
    assert (await store.get(["settings"]))["settings"] == {"retentionHours": 24, "popupWidth": 400}

    await service.update_settings(retention_hours=6)
    again = await service.ensure_defaults()
    assert again.retention_hours == 6


async def test_update_settings_merges(service):
    await service.update_settings(popup_width=600)
    merged = await service.update_settings(retention_hours=12)
    assert merged.popup_width == 600
    assert merged.retention_hours == 12


# -- Housekeeping --------------------------------------------------------------

async def test_purge_expired_only_removes_expired(service, clock):
    keep = await service.add_item("https://keep.test")
    await service.set_item_expiry(keep.id, "never")
    await service.add_item("https://drop.test")
    clock.advance(25 * MS_PER_HOUR)
    assert await service.purge_expired() == 1
    assert (await service.get_view()).visible_ids == [keep.id]


async def test_export_all_is_pretty_json(service):
    await service.add_item("https://a.test", "Ä title")
    exported = await service.export_all()
    assert "\n  " in exported
    assert json.loads(exported)[0]["title"] == "Ä title"


async def test_wipe_all_clears_items_and_order(service, store):
    a = await service.add_item("https://a.test")
    await store.set({"manualOrder": [a.id]})
    await service.wipe_all()
    raw = await store.get(["items", "manualOrder"])
    assert raw == {"items": [], "manualOrder": []}


async def test_store_error_propagates(clock):
    service = TempTabsService(FailingStore(), clock, SequentialIds())
    with pytest.raises(StoreError):
        await service.add_item("https://a.test")
