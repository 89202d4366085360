"""View Engine: derives the ordered, read-only list view from raw persisted state.

Invariants:
    - total_live_count is computed BEFORE search and hide-expired filtering, so it only
      moves when time crosses an expiry or the collection itself changes
    - Pipeline order is fixed: search filter -> hide expired -> sort
    - Search is a case-insensitive substring match on title, domain OR url
    - Sorting is stable; manual mode with an empty manual order falls back to newest
    - Nothing here mutates the collection or persisted state

Design Decisions:
    - Filter text and edit mode live in an explicit ViewContext passed by the caller,
      not in module-level state
    - Text sorts use locale.strxfrm over casefolded text (locale-aware when the
      process locale is set, plain casefold ordering under the C locale)
"""

import locale
from dataclasses import dataclass, field
from typing import Callable, Sequence

from temptabs.core.domain_types import MAX_ITEMS, SortMode
from temptabs.core.expiry import describe_expiry, format_timestamp, is_expired
from temptabs.core.item import Item
from temptabs.core.ordering import apply_manual_order


@dataclass(frozen=True)
class ViewPrefs:
    """Persisted display preferences."""

    sort_mode: SortMode = SortMode.NEWEST
    hide_expired: bool = True


@dataclass
class ViewContext:
    """Per-session UI state owned by whoever drives rendering."""

    filter_text: str = ""
    edit_mode: bool = False


@dataclass(frozen=True)
class View:
    """Snapshot handed to the render callback."""

    visible_items: tuple[Item, ...]
    total_live_count: int
    sort_mode: SortMode = SortMode.NEWEST
    hide_expired: bool = True
    query: str = ""
    built_at: int = 0
    manual_order: tuple[str, ...] = field(default_factory=tuple)

    @property
    def visible_ids(self) -> list[str]:
        return [item.id for item in self.visible_items]

    @property
    def shown_count(self) -> int:
        return len(self.visible_items)


def matches_query(item: Item, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return (
        needle in (item.title or "").lower()
        or needle in (item.domain or "").lower()
        or needle in (item.url or "").lower()
    )


def _collation_key(text: str) -> str:
    folded = (text or "").casefold()
    try:
        return locale.strxfrm(folded)
    except ValueError:
        # strxfrm rejects embedded NUL characters
        return folded


_TEXT_FIELDS: dict[SortMode, Callable[[Item], str]] = {
    SortMode.TITLE: lambda item: item.title,
    SortMode.DOMAIN: lambda item: item.domain,
    SortMode.URL: lambda item: item.url,
}


def sort_items(
    items: Sequence[Item], mode: SortMode, manual_order: Sequence[str] = (),
) -> list[Item]:
    """Order items per sort mode. Pure, stable."""
    if mode is SortMode.MANUAL:
        if not manual_order:
            return sort_items(items, SortMode.NEWEST)
        return apply_manual_order(items, manual_order)
    if mode is SortMode.OLDEST:
        return sorted(items, key=lambda item: item.added_at)
    if mode in _TEXT_FIELDS:
        getter = _TEXT_FIELDS[mode]
        return sorted(items, key=lambda item: _collation_key(getter(item)))
    if mode is SortMode.NEWEST:
        return sorted(items, key=lambda item: item.added_at, reverse=True)
    raise AssertionError(f"Unhandled sort mode: {mode}")


def build_view(
    items: Sequence[Item],
    manual_order: Sequence[str],
    prefs: ViewPrefs,
    search_query: str,
    now_ms: int,
) -> View:
    """Compose filter -> hide-expired -> sort into a read-only View."""
    total_live = sum(1 for item in items if not is_expired(item, now_ms))

    working = [item for item in items if matches_query(item, search_query)]
    if prefs.hide_expired:
        working = [item for item in working if not is_expired(item, now_ms)]

    ordered = sort_items(working, prefs.sort_mode, manual_order)
    return View(
        visible_items=tuple(ordered),
        total_live_count=total_live,
        sort_mode=prefs.sort_mode,
        hide_expired=prefs.hide_expired,
        query=search_query,
        built_at=now_ms,
        manual_order=tuple(manual_order),
    )


def summary_line(view: View, max_items: int = MAX_ITEMS) -> str:
    """Header counter, e.g. '3/7 shown • cap 500'."""
    return f"{view.shown_count}/{view.total_live_count} shown • cap {max_items}"


def handle_visible(context: ViewContext, sort_mode: SortMode) -> bool:
    """Drag handles only show while editing a manually ordered list."""
    return context.edit_mode and sort_mode is SortMode.MANUAL


def item_meta_line(item: Item, now_ms: int) -> str:
    """Secondary line under each item: domain, added time, expiry state."""
    return (
        f"{item.domain} • added {format_timestamp(item.added_at)} • "
        f"{describe_expiry(item, now_ms)}"
    )
