"""View, order, settings and badge schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from temptabs.core.badge import BadgeState
from temptabs.core.domain_types import Direction, SortMode
from temptabs.core.records import UserSettings
from temptabs.core.view import View, summary_line
from temptabs.schemas.items import ItemResponse


class ViewResponse(BaseModel):
    items: list[ItemResponse]
    visible_ids: list[str]
    total_live_count: int
    shown_count: int
    sort_mode: SortMode
    hide_expired: bool
    query: str = ""
    summary: str

    @classmethod
    def from_view(cls, view: View, max_items: int) -> "ViewResponse":
        return cls(
            items=[ItemResponse.from_item(i, view.built_at) for i in view.visible_items],
            visible_ids=view.visible_ids,
            total_live_count=view.total_live_count,
            shown_count=view.shown_count,
            sort_mode=view.sort_mode,
            hide_expired=view.hide_expired,
            query=view.query,
            summary=summary_line(view, max_items),
        )


class ViewPrefsUpdate(BaseModel):
    sort_mode: SortMode | None = None
    hide_expired: bool | None = None


class ViewPrefsResponse(BaseModel):
    sort_mode: SortMode
    hide_expired: bool


class DragReorder(BaseModel):
    """One drop: dragged_id lands before/after target_id within visible_ids."""
    visible_ids: list[str] = Field(max_length=5000)
    dragged_id: str = Field(min_length=1)
    target_id: str = Field(min_length=1)
    place_after: bool = False


class MoveStep(BaseModel):
    item_id: str = Field(min_length=1)
    direction: Literal["up", "down"]

    @property
    def step(self) -> Direction:
        return Direction.UP if self.direction == "up" else Direction.DOWN


class OrderResponse(BaseModel):
    manual_order: list[str]


class SettingsUpdate(BaseModel):
    retention_hours: float | None = Field(None, gt=0, le=24 * 365)
    popup_width: int | None = Field(None, ge=320, le=800)


class SettingsResponse(BaseModel):
    retention_hours: float
    popup_width: int

    @classmethod
    def from_settings(cls, settings: UserSettings) -> "SettingsResponse":
        return cls(
            retention_hours=settings.retention_hours,
            popup_width=settings.popup_width,
        )


class BadgeResponse(BaseModel):
    text: str = ""
    warning: bool = False
    cleared: bool = True

    @classmethod
    def from_state(cls, state: BadgeState | None) -> "BadgeResponse":
        if state is None:
            return cls()
        return cls(text=state.text, warning=state.warning, cleared=False)


class PurgeResponse(BaseModel):
    removed: int
    badge: BadgeResponse
