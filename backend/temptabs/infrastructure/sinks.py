"""Badge and render sinks: in-process stand-ins for the host badge and list renderer.

Invariants:
    - RecordingBadgeSink.state is None exactly when the badge is cleared
    - LatestViewSink keeps only the most recent rendered View
"""

import logging

from temptabs.core.badge import BadgeState
from temptabs.core.view import View

logger = logging.getLogger(__name__)


class RecordingBadgeSink:
    """Keeps the last badge state so the API can report it."""

    def __init__(self):
        self.state: BadgeState | None = None

    def set_count(self, text: str, warning: bool) -> None:
        self.state = BadgeState(text=text, warning=warning)
        logger.debug(f"Badge set to {text}", extra={"live_count": text})

    def clear(self) -> None:
        self.state = None
        logger.debug("Badge cleared")


class LatestViewSink:
    """Render callback that remembers the last painted view."""

    def __init__(self):
        self.view: View | None = None
        self.renders = 0

    def __call__(self, view: View) -> None:
        self.view = view
        self.renders += 1
