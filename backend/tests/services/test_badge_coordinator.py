"""Badge/Cleanup Coordinator: periodic refresh vs user purge.

Invariants:
    - request_cleanup never deletes, even when items are expired
    - request_purge deletes expired items and then refreshes the badge
    - Zero live items clear the badge
"""

from temptabs.core.domain_types import MS_PER_HOUR
from temptabs.infrastructure.sinks import RecordingBadgeSink
from temptabs.services.badge_coordinator import BadgeCleanupCoordinator


async def test_cleanup_counts_live_items_without_deleting(service, coordinator, badge, store, clock):
    await service.add_item("https://a.test")
    late = await service.add_item("https://b.test")
    await service.set_item_expiry(late.id, "48")
    clock.advance(30 * MS_PER_HOUR)

    state = await coordinator.request_cleanup()

    assert state.text == "1"
    assert badge.state == state
    assert len((await store.get(["items"]))["items"]) == 2


async def test_cleanup_clears_badge_when_nothing_live(coordinator, badge):
    badge.set_count("7", False)
    assert await coordinator.request_cleanup() is None
    assert badge.state is None


async def test_cleanup_sets_warning_near_capacity(service):
    badge = RecordingBadgeSink()
    coordinator = BadgeCleanupCoordinator(service, badge, max_items=5, warning_margin=1)
    for n in range(4):
        await service.add_item(f"https://{n}.test")
    state = await coordinator.request_cleanup()
    assert state.text == "4"
    assert state.warning is True


async def test_purge_removes_expired_then_refreshes_badge(service, coordinator, badge, store, clock):
    keep = await service.add_item("https://keep.test")
    await service.set_item_expiry(keep.id, "never")
    await service.add_item("https://old.test")
    clock.advance(24 * MS_PER_HOUR)

    result = await coordinator.request_purge()

    assert result.removed == 1
    assert result.badge.text == "1"
    assert badge.state.text == "1"
    ids = [record["id"] for record in (await store.get(["items"]))["items"]]
    assert ids == [keep.id]


async def test_purge_on_empty_store(coordinator, badge):
    result = await coordinator.request_purge()
    assert result.removed == 0
    assert result.badge is None
    assert badge.state is None
