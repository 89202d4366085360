"""Item Schemas: Pydantic models with field-level validation for item endpoints.

Invariants:
    - ItemCreate.url: stripped, non-empty; no scheme requirement (unparseable urls
      are still saved, with an empty domain)
    - ExpiryUpdate.choice must parse as 'never' | 'default' | positive hours
    - ItemResponse carries derived display fields (expired, preset, meta) computed
      at response time from the service clock

Design Decisions:
    - Expiry choice validated at the boundary so clients get a 400, while the core
      keeps treating invalid choices as no-ops
"""

from pydantic import BaseModel, Field, field_validator

from temptabs.core.expiry import infer_preset, is_expired, parse_expiry_choice
from temptabs.core.item import Item
from temptabs.core.view import item_meta_line


class ItemCreate(BaseModel):
    """Add a link explicitly (popup 'add current tab' or API clients)."""
    url: str = Field(min_length=1, max_length=8192)
    title: str | None = Field(None, max_length=2000)

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url cannot be empty or whitespace")
        return v


class PageAdd(BaseModel):
    """'Add this page' context-menu payload."""
    page_url: str | None = Field(None, max_length=8192)
    tab_url: str | None = Field(None, max_length=8192)
    tab_title: str | None = Field(None, max_length=2000)


class LinkAdd(BaseModel):
    """'Add link' context-menu payload."""
    link_url: str | None = Field(None, max_length=8192)
    link_text: str | None = Field(None, max_length=2000)


class ExpiryUpdate(BaseModel):
    choice: str = Field(min_length=1, max_length=32)

    @field_validator("choice")
    @classmethod
    def validate_choice(cls, v: str) -> str:
        v = v.strip()
        if parse_expiry_choice(v) is None:
            raise ValueError("choice must be 'never', 'default' or a positive number of hours")
        return v


class ItemRename(BaseModel):
    title: str = Field(max_length=2000)


class ItemResponse(BaseModel):
    """Public item shape plus display-only derived fields."""
    id: str
    url: str
    title: str
    domain: str
    added_at: int
    expires_at: int | None = None
    expiry_preset: str | None = None
    expired: bool = False
    preset: str
    meta: str

    @classmethod
    def from_item(cls, item: Item, now_ms: int) -> "ItemResponse":
        return cls(
            id=item.id,
            url=item.url,
            title=item.title,
            domain=item.domain,
            added_at=item.added_at,
            expires_at=item.expires_at,
            expiry_preset=item.expiry_preset,
            expired=is_expired(item, now_ms),
            preset=infer_preset(item, now_ms),
            meta=item_meta_line(item, now_ms),
        )
