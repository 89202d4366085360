"""Collection Engine: add, remove, purge, trim-to-capacity and field edits over the item list.

Invariants:
    - Capacity enforcement is unconditional: when full, the item with the smallest
      added_at is evicted even if it is pinned; ties go to the earliest insertion position
    - A new id never collides with any id in the input, including ones evicted this call
    - purge_expired is the ONLY time-based deletion; pinned items always survive it
    - remove_item / update_item on an unknown id return the input contents unchanged
    - Input sequences are never mutated

Design Decisions:
    - The id generator is passed in as a zero-arg callable so the engine stays pure
      and tests can script collisions
"""

from dataclasses import replace
from typing import Callable, Sequence

from temptabs.core.domain_types import MAX_ITEMS
from temptabs.core.expiry import compute_initial_expiry, is_expired
from temptabs.core.item import Item, domain_from_url

_MAX_ID_ATTEMPTS = 64


def trim_to_capacity(
    items: Sequence[Item], capacity: int,
) -> tuple[list[Item], list[Item]]:
    """Evict oldest-by-added_at until len <= capacity. Returns (kept, evicted)."""
    overflow = len(items) - max(capacity, 0)
    if overflow <= 0:
        return list(items), []

    ranked = sorted(range(len(items)), key=lambda i: (items[i].added_at, i))
    dropped = set(ranked[:overflow])
    kept = [item for i, item in enumerate(items) if i not in dropped]
    evicted = [items[i] for i in sorted(dropped)]
    return kept, evicted


def _fresh_id(new_id: Callable[[], str], taken: set[str]) -> str:
    for _ in range(_MAX_ID_ATTEMPTS):
        candidate = new_id()
        if candidate and candidate not in taken:
            return candidate
    raise RuntimeError(
        f"Id generator produced no unused id in {_MAX_ID_ATTEMPTS} attempts",
    )


def add_item(
    items: Sequence[Item],
    url: str,
    title: str | None,
    now_ms: int,
    retention_hours: float,
    new_id: Callable[[], str],
    max_items: int = MAX_ITEMS,
) -> tuple[list[Item], Item]:
    """Append a new item, evicting the oldest first when at capacity. Pure."""
    expires_at = compute_initial_expiry(now_ms, retention_hours)
    kept, _evicted = trim_to_capacity(items, max_items - 1)

    item = Item(
        id=_fresh_id(new_id, {existing.id for existing in items}),
        url=url,
        title=title or url,
        domain=domain_from_url(url),
        added_at=now_ms,
        expires_at=expires_at,
    )
    return [*kept, item], item


def purge_expired(items: Sequence[Item], now_ms: int) -> list[Item]:
    return [item for item in items if not is_expired(item, now_ms)]


def remove_item(items: Sequence[Item], item_id: str) -> list[Item]:
    return [item for item in items if item.id != item_id]


def find_item(items: Sequence[Item], item_id: str) -> Item | None:
    return next((item for item in items if item.id == item_id), None)


def update_item(
    items: Sequence[Item], item_id: str, transform: Callable[[Item], Item],
) -> list[Item]:
    """Apply transform to the matching item, keeping its position."""
    return [transform(item) if item.id == item_id else item for item in items]


def rename_item(items: Sequence[Item], item_id: str, title: str) -> list[Item]:
    """Direct title edit. A blank title resets to the url."""
    cleaned = title.strip()
    return update_item(
        items, item_id, lambda item: replace(item, title=cleaned or item.url),
    )


def live_count(items: Sequence[Item], now_ms: int) -> int:
    return sum(1 for item in items if not is_expired(item, now_ms))
