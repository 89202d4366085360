"""ORM Models: SQLAlchemy declarative models backing the item store.

Design Decisions:
    - The store is a key-value table: records keep the persisted JSON shape
      (settings, items, manualOrder, sortMode, hideExpired) instead of being normalized
"""

from temptabs.models.kv_record import KvRecord  # noqa: F401
