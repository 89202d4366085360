"""Clock and id generation adapters."""

import time
from uuid import uuid4

from temptabs.core.repository_protocols import Clock


class SystemClock:
    def now(self) -> int:
        """Current wall-clock time in ms since the epoch."""
        return time.time_ns() // 1_000_000


class TimestampIdGenerator:
    """Ids shaped '<ms>-<6 hex chars>'; the collection engine retries on collision."""

    def __init__(self, clock: Clock):
        self.clock = clock

    def new_id(self) -> str:
        return f"{self.clock.now()}-{uuid4().hex[:6]}"
