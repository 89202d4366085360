"""KvRecord ORM: one row per top-level store key, value kept as JSON.

Invariants:
    - key is the primary key (one of settings, items, manualOrder, sortMode, hideExpired)
    - value holds the exact JSON written by the service; decoding happens in core/records.py
    - updated_at changes on every write
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from temptabs.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KvRecord(Base):
    """Single store record."""
    __tablename__ = "kv_records"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
