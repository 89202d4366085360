"""Service Container: wires store, clock, ids, sinks, service, coordinator and timer.

Invariants:
    - Exactly one container per process once init_container() ran; get_container()
      raises before that
    - The view refresher is subscribed to store changes at build time
    - The periodic trigger calls the NON-destructive request_cleanup, then schedules
      a view refresh; it never purges

Design Decisions:
    - Module-level singleton initialized from the FastAPI lifespan (same pattern as
      infrastructure/database.py db_manager); tests build containers with fakes
"""

import logging
from dataclasses import dataclass

from temptabs.config import Settings
from temptabs.core.repository_protocols import Clock, IdGenerator, ItemStore
from temptabs.infrastructure import database
from temptabs.infrastructure.clock import SystemClock, TimestampIdGenerator
from temptabs.infrastructure.kv_store import MemoryItemStore, SqlItemStore
from temptabs.infrastructure.scheduler import PeriodicTrigger
from temptabs.infrastructure.sinks import LatestViewSink, RecordingBadgeSink
from temptabs.services.badge_coordinator import BadgeCleanupCoordinator
from temptabs.services.temptabs_service import TempTabsService
from temptabs.services.view_refresher import ViewRefresher

logger = logging.getLogger(__name__)


@dataclass
class Container:
    store: ItemStore
    clock: Clock
    service: TempTabsService
    coordinator: BadgeCleanupCoordinator
    refresher: ViewRefresher
    badge: RecordingBadgeSink
    view_sink: LatestViewSink
    trigger: PeriodicTrigger
    max_items: int


def _build_store(settings: Settings) -> ItemStore:
    if settings.store_backend == "memory":
        return MemoryItemStore()
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    return SqlItemStore(manager)


def build_container(
    settings: Settings,
    *,
    store: ItemStore | None = None,
    clock: Clock | None = None,
    ids: IdGenerator | None = None,
) -> Container:
    store = store if store is not None else _build_store(settings)
    clock = clock or SystemClock()
    service = TempTabsService(
        store, clock, ids or TimestampIdGenerator(clock),
        default_retention_hours=settings.default_retention_hours,
        max_items=settings.max_items,
    )
    badge = RecordingBadgeSink()
    coordinator = BadgeCleanupCoordinator(
        service, badge,
        max_items=settings.max_items,
        warning_margin=settings.badge_warning_margin,
    )
    view_sink = LatestViewSink()
    refresher = ViewRefresher(service, view_sink)
    store.subscribe(refresher.on_store_changed)

    async def tick() -> None:
        await coordinator.request_cleanup()
        refresher.schedule()

    trigger = PeriodicTrigger(
        settings.cleanup_interval_minutes * 60,
        tick,
        fire_on_start=settings.cleanup_on_start,
        name="cleanup",
    )
    return Container(
        store=store, clock=clock, service=service, coordinator=coordinator,
        refresher=refresher, badge=badge, view_sink=view_sink,
        trigger=trigger, max_items=settings.max_items,
    )


_container: Container | None = None


def init_container(container: Container) -> Container:
    global _container
    _container = container
    return container


def reset_container() -> None:
    global _container
    _container = None


def get_container() -> Container:
    if _container is None:
        raise RuntimeError("Service container not initialized")
    return _container
