"""Domain Types: identity aliases, limits, and closed enums shared by every core module.

Invariants:
    - Timestamps are integer milliseconds since the epoch (EpochMs), never datetimes
    - MAX_ITEMS (500) is the single source of truth for collection capacity
    - Sort modes, expiry choice kinds, directions and store keys are closed Enums,
      so no engine dispatches on raw strings

Design Decisions:
    - NewType over wrapper classes: ids stay plain strings in persisted JSON
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity & Value Types ──────────────────────────────────────

ItemId = NewType("ItemId", str)
EpochMs = NewType("EpochMs", int)


# ─── Limits & Constants ──────────────────────────────────────────

MS_PER_HOUR: int = 3_600_000
MAX_ITEMS: int = 500
DEFAULT_RETENTION_HOURS: float = 24
DEFAULT_POPUP_WIDTH: int = 400
BADGE_WARNING_MARGIN: int = 50
# Upper bound for any expiry span (choices and retention); keeps ms arithmetic finite
MAX_EXPIRY_HOURS: int = 24 * 365 * 10

# Preset ladder used to re-derive a UI label for legacy items
PRESET_LADDER_HOURS: tuple[int, ...] = (1, 2, 6, 12, 24, 48, 72, 168)
PRESET_TOLERANCE_MS: int = 5 * 60 * 1000


# ─── Enums ───────────────────────────────────────────────────────

class SortMode(str, Enum):
    """Display orderings offered by the list view."""
    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE = "title"
    DOMAIN = "domain"
    URL = "url"
    MANUAL = "manual"

    @classmethod
    def parse(cls, raw: object) -> "SortMode":
        """Decode a stored value; anything unknown falls back to NEWEST."""
        try:
            return cls(raw)
        except ValueError:
            return cls.NEWEST


class ExpiryChoiceKind(str, Enum):
    """Tag of an ExpiryChoice: pin, anchor to retention default, or explicit hours."""
    NEVER = "never"
    DEFAULT = "default"
    HOURS = "hours"


class Direction(int, Enum):
    """One-step move direction within the manual order."""
    UP = -1
    DOWN = 1


class StoreKey(str, Enum):
    """Top-level records held by the item store."""
    SETTINGS = "settings"
    ITEMS = "items"
    MANUAL_ORDER = "manualOrder"
    SORT_MODE = "sortMode"
    HIDE_EXPIRED = "hideExpired"
