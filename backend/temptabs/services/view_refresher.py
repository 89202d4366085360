"""View Refresher: re-renders the list after store changes and searches.

Invariants:
    - Every load takes a new generation number; a load whose generation was
      superseded while it awaited the store is discarded (returns None, no render)
    - Bursts of schedule() calls within one event-loop tick produce a single load
    - A change arriving while a load is in flight triggers exactly one more load,
      so the last render always reflects the latest write
    - Only changes to items, manualOrder, sortMode or hideExpired trigger a refresh
    - A failed background refresh is logged and ends its task cleanly; load()
      still raises to direct callers

Design Decisions:
    - Filter text and edit mode are held in a ViewContext owned by the refresher,
      one per rendering session, instead of process-wide globals
"""

import asyncio
import logging

from temptabs.core.domain_types import StoreKey
from temptabs.core.repository_protocols import RenderCallback
from temptabs.core.view import View, ViewContext
from temptabs.services.temptabs_service import TempTabsService

logger = logging.getLogger(__name__)

_VIEW_KEYS = frozenset({
    StoreKey.ITEMS.value, StoreKey.MANUAL_ORDER.value,
    StoreKey.SORT_MODE.value, StoreKey.HIDE_EXPIRED.value,
})


class ViewRefresher:
    """Coalescing, staleness-aware driver for the render callback."""

    def __init__(
        self,
        service: TempTabsService,
        render: RenderCallback,
        context: ViewContext | None = None,
    ):
        self.service = service
        self.render = render
        self.context = context or ViewContext()
        self._generation = 0
        self._dirty = False
        self._pending: asyncio.Task | None = None

    @property
    def generation(self) -> int:
        return self._generation

    async def load(self) -> View | None:
        """Build and render the current view unless a newer load overtook this one."""
        self._generation += 1
        generation = self._generation
        view = await self.service.get_view(self.context.filter_text)
        if generation != self._generation:
            logger.debug(
                "Discarding stale view",
                extra={"generation": generation, "operation": "load"},
            )
            return None
        self.render(view)
        return view

    async def search(self, text: str) -> View | None:
        """Update the filter text and load; an overtaken search yields None."""
        self.context.filter_text = text
        return await self.load()

    def set_edit_mode(self, enabled: bool) -> asyncio.Task:
        self.context.edit_mode = enabled
        return self.schedule()

    def schedule(self) -> asyncio.Task:
        """Request a refresh; coalesces with any refresh not yet started."""
        self._dirty = True
        if self._pending is None or self._pending.done():
            self._pending = asyncio.get_running_loop().create_task(self._drain())
        return self._pending

    def on_store_changed(self, changed_keys: list[str], area: str) -> None:
        """ItemStore change listener."""
        if _VIEW_KEYS.intersection(changed_keys):
            self.schedule()

    async def wait_idle(self) -> None:
        if self._pending is not None:
            await self._pending

    async def _drain(self) -> None:
        while self._dirty:
            # yield once so writes issued in the same tick fold into this load
            await asyncio.sleep(0)
            self._dirty = False
            try:
                await self.load()
            except Exception:
                # logged only; direct load() callers still see the error
                logger.error("View refresh failed", exc_info=True, extra={"operation": "refresh"})
