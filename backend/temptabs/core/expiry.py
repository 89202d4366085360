"""Expiry Engine: computes and mutates an item's expiry timestamp from presets and settings.

Invariants:
    - Initial expiry is always concrete: now + retention (no pinning at add time)
    - "default" and numeric presets anchor to item.added_at, never to the current time,
      so re-applying a preset later never extends the deadline
    - Invalid choices (non-numeric, zero, negative, NaN, infinite, or above
      MAX_EXPIRY_HOURS) are a no-op:
      the same Item object comes back unchanged
    - is_expired is inclusive: expires_at == now counts as expired
    - infer_preset never changes stored data

Design Decisions:
    - Choices are parsed into a tagged ExpiryChoice before dispatch, so callers that
      already validated input (schemas) and callers holding raw strings share one path
    - expiry_preset is treated as a cache that may be wrong or absent; infer_preset
      re-derives it from expires_at when missing
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from temptabs.core.domain_types import (
    MAX_EXPIRY_HOURS, MS_PER_HOUR, PRESET_LADDER_HOURS, PRESET_TOLERANCE_MS,
    ExpiryChoiceKind,
)
from temptabs.core.item import Item


@dataclass(frozen=True)
class ExpiryChoice:
    """Parsed expiry selection. hours is set only for the HOURS kind."""

    kind: ExpiryChoiceKind
    hours: float | None = None

    @property
    def label(self) -> str:
        """Preset label persisted alongside expires_at."""
        if self.kind is ExpiryChoiceKind.HOURS:
            return format_hours(self.hours)
        return self.kind.value


def format_hours(hours: float | None) -> str:
    """Render hours the way a JS String(Number) would: 48 -> '48', 1.5 -> '1.5'."""
    if hours is None:
        return ""
    if float(hours).is_integer():
        return str(int(hours))
    return repr(float(hours))


def hours_to_ms(hours: float) -> int:
    return int(round(hours * MS_PER_HOUR))


def parse_expiry_choice(raw: object) -> ExpiryChoice | None:
    """Parse 'never' | 'default' | '<hours in (0, MAX_EXPIRY_HOURS]>'. None when invalid."""
    if isinstance(raw, ExpiryChoice):
        return raw
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        text = str(raw)
    elif isinstance(raw, str):
        text = raw.strip()
    else:
        return None

    if text == ExpiryChoiceKind.NEVER.value:
        return ExpiryChoice(ExpiryChoiceKind.NEVER)
    if text == ExpiryChoiceKind.DEFAULT.value:
        return ExpiryChoice(ExpiryChoiceKind.DEFAULT)

    try:
        hours = float(text)
    except ValueError:
        return None
    if not math.isfinite(hours) or hours <= 0 or hours > MAX_EXPIRY_HOURS:
        return None
    return ExpiryChoice(ExpiryChoiceKind.HOURS, hours)


def compute_initial_expiry(now_ms: int, retention_hours: float) -> int:
    """Expiry for a newly added item. Pure."""
    return now_ms + hours_to_ms(retention_hours)


def set_item_expiry(
    item: Item,
    choice: object,
    retention_hours: float,
    now_ms: int | None = None,
) -> Item:
    """Apply an expiry choice to an item. Pure: returns a new Item or the same one.

    now_ms only matters for legacy items that never recorded added_at (stored
    as 0); those anchor to the current time instead of the epoch.
    """
    parsed = parse_expiry_choice(choice)
    if parsed is None:
        return item

    anchor = item.added_at
    if anchor <= 0 and now_ms is not None:
        anchor = now_ms

    if parsed.kind is ExpiryChoiceKind.NEVER:
        return replace(item, expires_at=None, expiry_preset=parsed.label)
    if parsed.kind is ExpiryChoiceKind.DEFAULT:
        hours = retention_hours
    elif parsed.kind is ExpiryChoiceKind.HOURS:
        hours = parsed.hours
    else:
        raise AssertionError(f"Unhandled expiry choice kind: {parsed.kind}")

    return replace(
        item,
        expires_at=anchor + hours_to_ms(hours),
        expiry_preset=parsed.label,
    )


def is_expired(item: Item, now_ms: int) -> bool:
    return item.expires_at is not None and item.expires_at <= now_ms


def infer_preset(item: Item, now_ms: int) -> str:
    """Label to pre-select in expiry controls. Never mutates the item."""
    if item.expiry_preset and parse_expiry_choice(item.expiry_preset) is not None:
        return item.expiry_preset
    if item.expires_at is None:
        return ExpiryChoiceKind.NEVER.value

    remaining = item.expires_at - now_ms
    for hours in PRESET_LADDER_HOURS:
        if abs(remaining - hours * MS_PER_HOUR) <= PRESET_TOLERANCE_MS:
            return str(hours)
    return ExpiryChoiceKind.DEFAULT.value


def format_timestamp(ms: int) -> str:
    """UTC minute-precision rendering used in item meta lines."""
    moment = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M UTC")


def describe_expiry(item: Item, now_ms: int) -> str:
    """Meta fragment: 'no expiry' | 'expires <when>', plus ' • Expired' once past."""
    if item.expires_at is None:
        return "no expiry"
    text = f"expires {format_timestamp(item.expires_at)}"
    if is_expired(item, now_ms):
        text += " • Expired"
    return text
