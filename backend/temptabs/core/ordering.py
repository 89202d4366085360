"""Order Reconciler: merges a partial or stale manual order with the live item set.

Invariants:
    - The stored manual order is never authoritative by itself: every consumer filters
      it against the live ids, so orphaned ids are skipped rather than raising
    - apply_manual_order is idempotent: applying it twice equals applying it once
    - Items the manual order does not mention keep their incoming relative order
    - reorder_by_drag only rearranges the currently visible ids; hidden ids keep their
      relative order and are placed ahead of the visible block
    - Every no-op returns a copy of the input order

Design Decisions:
    - Drag-and-drop is expressed as a (dragged_id, target_id, place_after) triple;
      pointer/DOM event wiring stays outside the core
    - Duplicate ids in a stored order are honoured once, at their first position
"""

from typing import Iterable, Sequence, TypeVar

from temptabs.core.domain_types import Direction

_T = TypeVar("_T")


def reconcile_order(manual_order: Iterable[str], live_ids: Iterable[str]) -> list[str]:
    """Drop stale and duplicate ids from manual_order, keeping first occurrences."""
    live = set(live_ids)
    seen: set[str] = set()
    reconciled = []
    for item_id in manual_order:
        if item_id in live and item_id not in seen:
            seen.add(item_id)
            reconciled.append(item_id)
    return reconciled


def apply_manual_order(working_set: Sequence[_T], manual_order: Sequence[str]) -> list[_T]:
    """Positioned items first (manual order), then the rest in their existing order.

    Elements of working_set only need an `id` attribute.
    """
    by_id = {item.id: item for item in working_set}
    placed_ids = reconcile_order(manual_order, by_id)
    placed = set(placed_ids)
    return [by_id[item_id] for item_id in placed_ids] + [
        item for item in working_set if item.id not in placed
    ]


def reorder_by_drag(
    manual_order: Sequence[str],
    visible_ids: Sequence[str],
    dragged_id: str,
    target_id: str,
    place_after: bool,
) -> list[str]:
    """Move dragged_id next to target_id within the visible block.

    Returns [ids of manual_order not visible] + [recomputed visible order].
    """
    if (
        dragged_id == target_id
        or dragged_id not in visible_ids
        or target_id not in visible_ids
    ):
        return list(manual_order)

    visible = list(dict.fromkeys(visible_ids))
    visible_set = set(visible)
    hidden = [item_id for item_id in manual_order if item_id not in visible_set]

    visible.remove(dragged_id)
    index = visible.index(target_id)
    if place_after:
        index += 1
    visible.insert(index, dragged_id)
    return hidden + visible


def move_one_step(
    manual_order: Sequence[str],
    collection_ids: Sequence[str],
    item_id: str,
    direction: Direction | int,
) -> list[str]:
    """Swap item_id with its neighbour in direction (-1 up, +1 down).

    An empty manual order is seeded from collection_ids first. A non-empty one is
    reconciled against collection_ids, with unpositioned ids appended, so the swap
    always acts on what the user sees.
    """
    step = Direction(direction).value

    if manual_order:
        order = reconcile_order(manual_order, collection_ids)
        positioned = set(order)
        order.extend(i for i in dict.fromkeys(collection_ids) if i not in positioned)
    else:
        order = list(dict.fromkeys(collection_ids))

    if item_id not in order:
        return list(manual_order)
    index = order.index(item_id)
    neighbour = index + step
    if neighbour < 0 or neighbour >= len(order):
        return list(manual_order)

    order[index], order[neighbour] = order[neighbour], order[index]
    return order
