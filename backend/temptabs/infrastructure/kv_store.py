"""Item Store Adapters: SQL-backed and in-memory implementations of the ItemStore protocol.

Invariants:
    - get() returns only keys that exist; absent keys are simply missing (never an error)
    - set() writes all keys of the partial in ONE transaction, then notifies listeners
    - Values cross the boundary as deep copies: callers can never alias stored state
    - Listener failures are logged and never undo or fail the write that triggered them
    - SQL failures surface as StoreError via DatabaseSessionManager

Design Decisions:
    - Key-value rows (kv_records) keep the persisted JSON shape, so the same
      decoding rules apply to both adapters
    - MemoryItemStore backs local development (TEMPTABS_STORE_BACKEND=memory) and tests
"""

import copy
import logging
from typing import Any, Callable, Iterable, Mapping

from sqlalchemy import select

from temptabs.core.repository_protocols import ChangeListener
from temptabs.infrastructure.database import DatabaseSessionManager
from temptabs.models.kv_record import KvRecord

logger = logging.getLogger(__name__)

STORE_AREA = "local"


class _ChangeNotifier:
    """Listener registry shared by both adapters."""

    def __init__(self, area: str = STORE_AREA):
        self.area = area
        self._listeners: list[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, changed_keys: list[str]) -> None:
        for listener in list(self._listeners):
            try:
                listener(changed_keys, self.area)
            except Exception:
                logger.error(
                    "Store change listener failed",
                    exc_info=True, extra={"operation": "notify"},
                )


class MemoryItemStore(_ChangeNotifier):
    """Process-local store."""

    def __init__(self, initial: Mapping[str, Any] | None = None, area: str = STORE_AREA):
        super().__init__(area)
        self._data: dict[str, Any] = copy.deepcopy(dict(initial or {}))

    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        return {
            key: copy.deepcopy(self._data[key]) for key in keys if key in self._data
        }

    async def set(self, partial: Mapping[str, Any]) -> None:
        for key, value in partial.items():
            self._data[key] = copy.deepcopy(value)
        self._notify(list(partial))


class SqlItemStore(_ChangeNotifier):
    """Store persisted in the kv_records table."""

    def __init__(self, manager: DatabaseSessionManager, area: str = STORE_AREA):
        super().__init__(area)
        self.manager = manager

    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        wanted = list(dict.fromkeys(keys))
        if not wanted:
            return {}
        async with self.manager.session() as db:
            result = await db.execute(
                select(KvRecord).where(KvRecord.key.in_(wanted)),
            )
            return {
                record.key: copy.deepcopy(record.value)
                for record in result.scalars()
            }

    async def set(self, partial: Mapping[str, Any]) -> None:
        if not partial:
            return
        async with self.manager.session() as db:
            for key, value in partial.items():
                record = await db.get(KvRecord, key)
                if record is None:
                    db.add(KvRecord(key=key, value=copy.deepcopy(value)))
                else:
                    record.value = copy.deepcopy(value)
            await db.commit()
        self._notify(list(partial))
