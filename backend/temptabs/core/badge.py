"""Badge State: pure mapping from live count to the host badge indicator.

Invariants:
    - A zero (or negative) live count clears the badge: badge_for_count returns None
    - warning is set once the count is within BADGE_WARNING_MARGIN of the capacity
"""

from dataclasses import dataclass

from temptabs.core.domain_types import BADGE_WARNING_MARGIN, MAX_ITEMS


@dataclass(frozen=True)
class BadgeState:
    text: str
    warning: bool = False


def badge_for_count(
    live_count: int,
    max_items: int = MAX_ITEMS,
    warning_margin: int = BADGE_WARNING_MARGIN,
) -> BadgeState | None:
    if live_count <= 0:
        return None
    return BadgeState(
        text=str(live_count),
        warning=live_count >= max_items - warning_margin,
    )
