"""Badge/Cleanup Coordinator: periodic refresh vs explicit purge, never conflated.

Invariants:
    - request_cleanup() (periodic / startup) only recomputes the live count and
      updates the badge; it MUST NOT delete anything
    - request_purge() (user-invoked) is the only path that hard-deletes expired
      items, and it always refreshes the badge afterwards
    - A zero live count clears the badge; a count within the warning margin of
      capacity sets the warning state

Design Decisions:
    - Badge state is computed by core/badge.py; this class only sequences IO
"""

import logging
from dataclasses import dataclass

from temptabs.core.badge import BadgeState, badge_for_count
from temptabs.core.domain_types import BADGE_WARNING_MARGIN, MAX_ITEMS
from temptabs.core.repository_protocols import BadgeSink
from temptabs.services.temptabs_service import TempTabsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurgeResult:
    removed: int
    badge: BadgeState | None


class BadgeCleanupCoordinator:
    """Drives the badge from the periodic trigger and the purge action."""

    def __init__(
        self,
        service: TempTabsService,
        badge: BadgeSink,
        *,
        max_items: int = MAX_ITEMS,
        warning_margin: int = BADGE_WARNING_MARGIN,
    ):
        self.service = service
        self.badge = badge
        self.max_items = max_items
        self.warning_margin = warning_margin

    async def request_cleanup(self) -> BadgeState | None:
        """Non-destructive refresh: recount live items and repaint the badge."""
        count = await self.service.live_count()
        state = badge_for_count(count, self.max_items, self.warning_margin)
        if state is None:
            self.badge.clear()
        else:
            self.badge.set_count(state.text, state.warning)
        logger.info(
            "Badge refreshed",
            extra={"operation": "request_cleanup", "live_count": count},
        )
        return state

    async def request_purge(self) -> PurgeResult:
        """Destructive: drop expired items, then refresh the badge."""
        removed = await self.service.purge_expired()
        state = await self.request_cleanup()
        return PurgeResult(removed=removed, badge=state)
