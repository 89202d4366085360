"""Store Records: decoding / encoding between raw store values and core types.

Invariants:
    - Decoding never raises: a missing or malformed record falls back to its default
    - Item records without a string id or url are dropped; duplicate ids keep the first
    - A non-numeric or non-positive expiresAt decodes as absent (pinned)
    - Encoded records are JSON-safe dicts using the persisted camelCase keys;
      expiresAt / expiryPreset are omitted entirely when absent
    - hideExpired is true unless the stored value is exactly False

Design Decisions:
    - Lenient decoding mirrors how older stored data was tolerated on read; the
      engines only ever see well-formed Items
    - Settings updates merge over stored values and defaults, so partial writes
      from an options form never drop unrelated fields
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from temptabs.core.domain_types import (
    DEFAULT_POPUP_WIDTH, DEFAULT_RETENTION_HOURS, MAX_EXPIRY_HOURS, SortMode, StoreKey,
)
from temptabs.core.item import Item, domain_from_url
from temptabs.core.view import ViewPrefs


@dataclass(frozen=True)
class UserSettings:
    retention_hours: float = DEFAULT_RETENTION_HOURS
    popup_width: int = DEFAULT_POPUP_WIDTH


@dataclass(frozen=True)
class StoreSnapshot:
    """Decoded view of every top-level record that was requested."""

    settings: UserSettings = field(default_factory=UserSettings)
    items: list[Item] = field(default_factory=list)
    manual_order: list[str] = field(default_factory=list)
    view_prefs: ViewPrefs = field(default_factory=ViewPrefs)


ALL_KEYS: tuple[str, ...] = tuple(key.value for key in StoreKey)


# ─── Primitive coercion ──────────────────────────────────────────

def _positive_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def _retention_hours(value: Any) -> float | None:
    number = _positive_number(value)
    if number is None or number > MAX_EXPIRY_HOURS:
        return None
    return number


def _timestamp(value: Any) -> int | None:
    number = _positive_number(value)
    return int(number) if number is not None else None


# ─── Settings ────────────────────────────────────────────────────

def decode_settings(
    raw: Any, default_retention_hours: float = DEFAULT_RETENTION_HOURS,
) -> UserSettings:
    data = raw if isinstance(raw, Mapping) else {}
    retention = _retention_hours(data.get("retentionHours"))
    width = _positive_number(data.get("popupWidth"))
    return UserSettings(
        retention_hours=retention if retention is not None else default_retention_hours,
        popup_width=int(width) if width is not None else DEFAULT_POPUP_WIDTH,
    )


def encode_settings(settings: UserSettings) -> dict:
    return {
        "retentionHours": settings.retention_hours,
        "popupWidth": settings.popup_width,
    }


def merge_settings(
    current: UserSettings,
    retention_hours: float | None = None,
    popup_width: int | None = None,
) -> UserSettings:
    updates: dict[str, Any] = {}
    if _retention_hours(retention_hours) is not None:
        updates["retention_hours"] = retention_hours
    if _positive_number(popup_width) is not None:
        updates["popup_width"] = int(popup_width)
    return replace(current, **updates)


def settings_need_defaults(raw: Any) -> bool:
    """True when no usable retentionHours is stored (first start or corrupted record)."""
    if not isinstance(raw, Mapping):
        return True
    value = raw.get("retentionHours")
    return isinstance(value, bool) or not isinstance(value, (int, float))


# ─── Items ───────────────────────────────────────────────────────

def decode_item(raw: Any) -> Item | None:
    if not isinstance(raw, Mapping):
        return None
    item_id, url = raw.get("id"), raw.get("url")
    if not isinstance(item_id, str) or not item_id:
        return None
    if not isinstance(url, str) or not url:
        return None

    title = raw.get("title")
    domain = raw.get("domain")
    preset = raw.get("expiryPreset")
    return Item(
        id=item_id,
        url=url,
        title=title if isinstance(title, str) and title else url,
        domain=domain if isinstance(domain, str) else domain_from_url(url),
        # 0 marks a missing addedAt; an epoch-0 timestamp is not distinguishable
        added_at=_timestamp(raw.get("addedAt")) or 0,
        expires_at=_timestamp(raw.get("expiresAt")),
        expiry_preset=preset if isinstance(preset, str) and preset else None,
    )


def decode_items(raw: Any) -> list[Item]:
    if not isinstance(raw, list):
        return []
    items: list[Item] = []
    seen: set[str] = set()
    for entry in raw:
        item = decode_item(entry)
        if item is None or item.id in seen:
            continue
        seen.add(item.id)
        items.append(item)
    return items


def encode_item(item: Item) -> dict:
    record: dict[str, Any] = {
        "id": item.id,
        "url": item.url,
        "title": item.title,
        "domain": item.domain,
        "addedAt": item.added_at,
    }
    if item.expires_at is not None:
        record["expiresAt"] = item.expires_at
    if item.expiry_preset is not None:
        record["expiryPreset"] = item.expiry_preset
    return record


def encode_items(items: list[Item]) -> list[dict]:
    return [encode_item(item) for item in items]


# ─── Manual order & view prefs ───────────────────────────────────

def decode_manual_order(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [entry for entry in raw if isinstance(entry, str) and entry]


def decode_view_prefs(sort_mode: Any, hide_expired: Any) -> ViewPrefs:
    return ViewPrefs(
        sort_mode=SortMode.parse(sort_mode),
        hide_expired=hide_expired is not False,
    )


def encode_view_prefs(prefs: ViewPrefs) -> dict:
    return {
        StoreKey.SORT_MODE.value: prefs.sort_mode.value,
        StoreKey.HIDE_EXPIRED.value: prefs.hide_expired,
    }


# ─── Whole snapshot ──────────────────────────────────────────────

def decode_snapshot(
    record: Mapping[str, Any],
    default_retention_hours: float = DEFAULT_RETENTION_HOURS,
) -> StoreSnapshot:
    """Decode a store.get() result. Keys that were not requested decode to defaults."""
    return StoreSnapshot(
        settings=decode_settings(
            record.get(StoreKey.SETTINGS.value), default_retention_hours,
        ),
        items=decode_items(record.get(StoreKey.ITEMS.value)),
        manual_order=decode_manual_order(record.get(StoreKey.MANUAL_ORDER.value)),
        view_prefs=decode_view_prefs(
            record.get(StoreKey.SORT_MODE.value),
            record.get(StoreKey.HIDE_EXPIRED.value),
        ),
    )
