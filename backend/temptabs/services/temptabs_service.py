"""TempTabs Service: async read-compute-write transactions over the item store.

Invariants:
    - Every mutation holds the service lock, re-reads the records it needs from the
      store, computes the new state with pure core functions, and writes back with a
      single store.set(); no cached copy is reused across operations
    - Operations on unknown ids are silent no-ops (None / False), never errors
    - Store failures (StoreError) propagate unchanged to the caller
    - Nothing in here deletes on the basis of time except purge_expired()
    - A write is skipped when the computed state equals what was read

Design Decisions:
    - asyncio.Lock serializes mutations within the process (single logical owner);
      reads used only for display (get_view, live_count) do not take the lock
    - Stale manual-order ids are left in place and filtered on read; wipe_all is
      the only operation that resets the manual order wholesale
"""

import asyncio
import json
import logging

from temptabs.core import collection, ordering
from temptabs.core.domain_types import (
    DEFAULT_RETENTION_HOURS, MAX_ITEMS, Direction, SortMode, StoreKey,
)
from temptabs.core.expiry import set_item_expiry as apply_expiry
from temptabs.core.item import Item
from temptabs.core.records import (
    StoreSnapshot, UserSettings, decode_snapshot, encode_items,
    encode_settings, encode_view_prefs, merge_settings, settings_need_defaults,
)
from temptabs.core.repository_protocols import Clock, IdGenerator, ItemStore
from temptabs.core.view import View, ViewPrefs, build_view, sort_items

logger = logging.getLogger(__name__)

_ITEMS = StoreKey.ITEMS
_SETTINGS = StoreKey.SETTINGS
_ORDER = StoreKey.MANUAL_ORDER
_PREF_KEYS = (StoreKey.SORT_MODE, StoreKey.HIDE_EXPIRED)


class TempTabsService:
    """Exposed operations of the item lifecycle engine."""

    def __init__(
        self,
        store: ItemStore,
        clock: Clock,
        ids: IdGenerator,
        *,
        default_retention_hours: float = DEFAULT_RETENTION_HOURS,
        max_items: int = MAX_ITEMS,
    ):
        self.store = store
        self.clock = clock
        self.ids = ids
        self.default_retention_hours = default_retention_hours
        self.max_items = max_items
        self._lock = asyncio.Lock()

    async def _read(self, *keys: StoreKey) -> StoreSnapshot:
        raw = await self.store.get([key.value for key in keys])
        return decode_snapshot(raw, self.default_retention_hours)

    # ─── Lifecycle ───────────────────────────────────────────────

    async def ensure_defaults(self) -> UserSettings:
        """Write default settings when none are stored (first start)."""
        async with self._lock:
            raw = await self.store.get([_SETTINGS.value])
            current = raw.get(_SETTINGS.value)
            snapshot = decode_snapshot(raw, self.default_retention_hours)
            if settings_need_defaults(current):
                await self.store.set({_SETTINGS.value: encode_settings(snapshot.settings)})
                logger.info("Default settings initialized", extra={"operation": "ensure_defaults"})
            return snapshot.settings

    # ─── Items ───────────────────────────────────────────────────

    async def add_item(self, url: str, title: str | None = None) -> Item:
        """Save a link with the retention-default expiry, evicting the oldest when full."""
        async with self._lock:
            snapshot = await self._read(_SETTINGS, _ITEMS)
            items, item = collection.add_item(
                snapshot.items, url, title, self.clock.now(),
                snapshot.settings.retention_hours, self.ids.new_id,
                max_items=self.max_items,
            )
            await self.store.set({_ITEMS.value: encode_items(items)})

        evicted = len(snapshot.items) + 1 - len(items)
        logger.info(
            "Item added",
            extra={"item_id": item.id, "operation": "add_item", "evicted": evicted or None},
        )
        return item

    async def add_page(
        self,
        page_url: str | None,
        tab_url: str | None = None,
        tab_title: str | None = None,
    ) -> Item | None:
        """'Add this page' menu action: page url wins over the tab's url."""
        url = page_url or tab_url
        if not url:
            return None
        return await self.add_item(url, tab_title or url)

    async def add_link(self, link_url: str | None, link_text: str | None = None) -> Item | None:
        """'Add link' menu action: the link text becomes the title."""
        if not link_url:
            return None
        return await self.add_item(link_url, link_text or link_url)

    async def remove_item(self, item_id: str) -> bool:
        async with self._lock:
            snapshot = await self._read(_ITEMS)
            items = collection.remove_item(snapshot.items, item_id)
            if len(items) == len(snapshot.items):
                return False
            await self.store.set({_ITEMS.value: encode_items(items)})
        logger.info("Item removed", extra={"item_id": item_id, "operation": "remove_item"})
        return True

    async def set_item_expiry(self, item_id: str, choice: object) -> Item | None:
        """Apply 'never' | 'default' | '<hours>'. Invalid choices leave the item as is."""
        async with self._lock:
            snapshot = await self._read(_SETTINGS, _ITEMS)
            current = collection.find_item(snapshot.items, item_id)
            if current is None:
                return None
            updated = apply_expiry(
                current, choice, snapshot.settings.retention_hours, self.clock.now(),
            )
            if updated == current:
                return current
            items = collection.update_item(snapshot.items, item_id, lambda _: updated)
            await self.store.set({_ITEMS.value: encode_items(items)})
        logger.info(
            f"Expiry set to {updated.expiry_preset}",
            extra={"item_id": item_id, "operation": "set_item_expiry"},
        )
        return updated

    async def rename_item(self, item_id: str, title: str) -> Item | None:
        async with self._lock:
            snapshot = await self._read(_ITEMS)
            if collection.find_item(snapshot.items, item_id) is None:
                return None
            items = collection.rename_item(snapshot.items, item_id, title)
            if items != snapshot.items:
                await self.store.set({_ITEMS.value: encode_items(items)})
            return collection.find_item(items, item_id)

    # ─── Ordering ────────────────────────────────────────────────

    async def reorder_drag(
        self,
        visible_ids: list[str],
        dragged_id: str,
        target_id: str,
        place_after: bool = False,
    ) -> list[str]:
        """Drop dragged_id next to target_id within the last rendered id sequence."""
        async with self._lock:
            snapshot = await self._read(_ORDER)
            order = ordering.reorder_by_drag(
                snapshot.manual_order, visible_ids, dragged_id, target_id, place_after,
            )
            if order != snapshot.manual_order:
                await self.store.set({_ORDER.value: order})
                logger.info(
                    "Manual order updated by drag",
                    extra={"item_id": dragged_id, "operation": "reorder_drag"},
                )
            return order

    async def move_item(self, item_id: str, direction: Direction | int) -> list[str]:
        """Swap item_id with its neighbour. Only acts while sort mode is manual."""
        async with self._lock:
            snapshot = await self._read(_ITEMS, _ORDER, *_PREF_KEYS)
            if snapshot.view_prefs.sort_mode is not SortMode.MANUAL:
                logger.debug(
                    "Move ignored outside manual sort mode",
                    extra={"item_id": item_id, "operation": "move_item"},
                )
                return list(snapshot.manual_order)

            displayed = sort_items(snapshot.items, SortMode.MANUAL, snapshot.manual_order)
            order = ordering.move_one_step(
                snapshot.manual_order, [item.id for item in displayed], item_id, direction,
            )
            if order != snapshot.manual_order:
                await self.store.set({_ORDER.value: order})
            return order

    # ─── View & preferences ──────────────────────────────────────

    async def get_view(
        self, query: str = "", prefs_override: ViewPrefs | None = None,
    ) -> View:
        snapshot = await self._read(_ITEMS, _ORDER, *_PREF_KEYS)
        prefs = prefs_override or snapshot.view_prefs
        return build_view(
            snapshot.items, snapshot.manual_order, prefs, query, self.clock.now(),
        )

    async def get_view_prefs(self) -> ViewPrefs:
        return (await self._read(*_PREF_KEYS)).view_prefs

    async def set_view_prefs(
        self,
        sort_mode: SortMode | None = None,
        hide_expired: bool | None = None,
    ) -> ViewPrefs:
        async with self._lock:
            current = (await self._read(*_PREF_KEYS)).view_prefs
            prefs = ViewPrefs(
                sort_mode=sort_mode if sort_mode is not None else current.sort_mode,
                hide_expired=hide_expired if hide_expired is not None else current.hide_expired,
            )
            await self.store.set(encode_view_prefs(prefs))
            return prefs

    # ─── Settings ────────────────────────────────────────────────

    async def get_settings(self) -> UserSettings:
        return (await self._read(_SETTINGS)).settings

    async def update_settings(
        self,
        retention_hours: float | None = None,
        popup_width: int | None = None,
    ) -> UserSettings:
        """Partial merge over stored settings. Existing item expiries are untouched."""
        async with self._lock:
            current = (await self._read(_SETTINGS)).settings
            merged = merge_settings(current, retention_hours, popup_width)
            await self.store.set({_SETTINGS.value: encode_settings(merged)})
        logger.info("Settings updated", extra={"operation": "update_settings"})
        return merged

    # ─── Housekeeping ────────────────────────────────────────────

    async def live_count(self) -> int:
        snapshot = await self._read(_ITEMS)
        return collection.live_count(snapshot.items, self.clock.now())

    async def purge_expired(self) -> int:
        """Hard-delete every expired item. Returns how many were removed."""
        async with self._lock:
            snapshot = await self._read(_ITEMS)
            items = collection.purge_expired(snapshot.items, self.clock.now())
            removed = len(snapshot.items) - len(items)
            if removed:
                await self.store.set({_ITEMS.value: encode_items(items)})
        logger.info(
            f"Purged {removed} expired item(s)",
            extra={"operation": "purge_expired", "removed": removed},
        )
        return removed

    async def export_all(self) -> str:
        """All items as pretty-printed JSON, in stored order."""
        snapshot = await self._read(_ITEMS)
        return json.dumps(encode_items(snapshot.items), indent=2, ensure_ascii=False)

    async def wipe_all(self) -> None:
        async with self._lock:
            await self.store.set({_ITEMS.value: [], _ORDER.value: []})
        logger.warning("All items wiped", extra={"operation": "wipe_all"})
