"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO (store, clock, id generation, badge, rendering) is reached through these types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no base class
    - Async only where implementations do IO (ItemStore); the pure engines that
      consume the data are never async, the shell orchestrates around them
"""

from typing import Any, Callable, Iterable, Mapping, Protocol

from temptabs.core.view import View

# (changed_keys, area) -> None
ChangeListener = Callable[[list[str], str], None]


class ItemStore(Protocol):
    """Async key-value persistence holding settings, items, manualOrder and view prefs.

    get() omits keys that have never been written. Failures raise StoreError.
    """
    async def get(self, keys: Iterable[str]) -> dict[str, Any]: ...
    async def set(self, partial: Mapping[str, Any]) -> None: ...
    def subscribe(self, listener: ChangeListener) -> Callable[[], None]: ...


class Clock(Protocol):
    def now(self) -> int: ...


class IdGenerator(Protocol):
    def new_id(self) -> str: ...


class BadgeSink(Protocol):
    """Host badge indicator."""
    def set_count(self, text: str, warning: bool) -> None: ...
    def clear(self) -> None: ...


class RenderCallback(Protocol):
    def __call__(self, view: View) -> None: ...
