"""View Refresher: staleness, coalescing and store-change wiring.

Invariants:
    - A load overtaken by a newer one is discarded and renders nothing
    - schedule() bursts in one tick produce a single render
    - A change during an in-flight load produces exactly one more render
    - Only view keys trigger a refresh
    - A failed background refresh is logged; the task itself finishes cleanly
"""

import asyncio

import pytest

from temptabs.core.errors import StoreError
from temptabs.services.temptabs_service import TempTabsService
from temptabs.services.view_refresher import ViewRefresher

from tests.services.fakes import GatedStore, UnreadableStore


async def test_load_renders_current_view(service, view_sink):
    item = await service.add_item("https://a.test")
    refresher = ViewRefresher(service, view_sink)
    view = await refresher.load()
    assert view.visible_ids == [item.id]
    assert view_sink.view is view
    assert refresher.generation == 1


async def test_stale_search_is_discarded(clock, ids, view_sink):
    store = GatedStore()
    service = TempTabsService(store, clock, ids)
    await service.add_item("https://alpha.test", "alpha")
    await service.add_item("https://beta.test", "beta")
    refresher = ViewRefresher(service, view_sink)

    store.gate.clear()
    first = asyncio.create_task(refresher.search("alpha"))
    second = asyncio.create_task(refresher.search("beta"))
    await asyncio.sleep(0)
    store.gate.set()
    stale, fresh = await asyncio.gather(first, second)

    assert stale is None
    assert fresh.query == "beta"
    assert view_sink.renders == 1
    assert view_sink.view is fresh


async def test_schedule_bursts_coalesce(service, view_sink):
    refresher = ViewRefresher(service, view_sink)
    task = refresher.schedule()
    assert refresher.schedule() is task
    assert refresher.schedule() is task
    await task
    assert view_sink.renders == 1


async def test_change_during_load_triggers_one_more_render(clock, ids, view_sink):
    store = GatedStore()
    service = TempTabsService(store, clock, ids)
    refresher = ViewRefresher(service, view_sink)

    store.gate.clear()
    task = refresher.schedule()
    for _ in range(3):
        await asyncio.sleep(0)
    assert store.reads == 1
    assert refresher.schedule() is task
    store.gate.set()
    await task

    assert view_sink.renders == 2


async def test_store_changes_refresh_view(service, store, view_sink):
    refresher = ViewRefresher(service, view_sink)
    store.subscribe(refresher.on_store_changed)
    item = await service.add_item("https://a.test")
    await refresher.wait_idle()
    assert view_sink.view.visible_ids == [item.id]


async def test_settings_change_does_not_refresh(service, view_sink):
    refresher = ViewRefresher(service, view_sink)
    refresher.on_store_changed(["settings"], "local")
    await refresher.wait_idle()
    assert view_sink.renders == 0


async def test_edit_mode_updates_context_and_refreshes(service, view_sink):
    refresher = ViewRefresher(service, view_sink)
    await refresher.set_edit_mode(True)
    assert refresher.context.edit_mode is True
    assert view_sink.renders == 1


async def test_failed_background_refresh_is_logged_not_raised(clock, ids, view_sink, caplog):
    store = UnreadableStore()
    refresher = ViewRefresher(TempTabsService(store, clock, ids), view_sink)
    store.subscribe(refresher.on_store_changed)

    await store.set({"items": []})
    task = refresher.schedule()
    await refresher.wait_idle()

    assert task.exception() is None
    assert view_sink.renders == 0
    assert "View refresh failed" in caplog.text


async def test_direct_load_still_raises_store_errors(clock, ids, view_sink):
    refresher = ViewRefresher(TempTabsService(UnreadableStore(), clock, ids), view_sink)
    with pytest.raises(StoreError):
        await refresher.load()
