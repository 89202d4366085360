"""View Routes: the filtered/sorted list, view preferences, and manual reordering.

Invariants:
    - GET /view never writes; sort_mode / hide_expired query params override the
      stored preferences for that request only
    - Order routes return the resulting manual order, unchanged on no-op moves
"""

from fastapi import APIRouter, Depends, Query

from temptabs.api.deps import container_dep, service_dep
from temptabs.core.domain_types import SortMode
from temptabs.core.errors import InvalidInputError
from temptabs.core.view import ViewPrefs
from temptabs.schemas.view import (
    DragReorder, MoveStep, OrderResponse, ViewPrefsResponse,
    ViewPrefsUpdate, ViewResponse,
)
from temptabs.services.container import Container
from temptabs.services.temptabs_service import TempTabsService

router = APIRouter(prefix="/api/v1", tags=["view"])


@router.get("/view", response_model=ViewResponse)
async def get_view(
    q: str = Query("", max_length=500),
    sort_mode: SortMode | None = Query(None),
    hide_expired: bool | None = Query(None),
    container: Container = Depends(container_dep),
):
    """Current list view with live and shown counts."""
    service = container.service
    override = None
    if sort_mode is not None or hide_expired is not None:
        stored = await service.get_view_prefs()
        override = ViewPrefs(
            sort_mode=sort_mode if sort_mode is not None else stored.sort_mode,
            hide_expired=hide_expired if hide_expired is not None else stored.hide_expired,
        )
    view = await service.get_view(q, override)
    return ViewResponse.from_view(view, container.max_items)


@router.get("/view/latest", response_model=ViewResponse)
async def latest_rendered_view(container: Container = Depends(container_dep)):
    """Last view painted by the background refresher (loads one if none yet)."""
    view = container.view_sink.view
    if view is None:
        view = await container.refresher.load() or container.view_sink.view
    if view is None:
        # overtaken by a newer load that has not rendered yet
        view = await container.service.get_view(container.refresher.context.filter_text)
    return ViewResponse.from_view(view, container.max_items)


@router.patch("/view/prefs", response_model=ViewPrefsResponse)
async def update_view_prefs(
    body: ViewPrefsUpdate, service: TempTabsService = Depends(service_dep),
):
    if body.sort_mode is None and body.hide_expired is None:
        raise InvalidInputError("No view preference to update", field="body")
    prefs = await service.set_view_prefs(body.sort_mode, body.hide_expired)
    return ViewPrefsResponse(sort_mode=prefs.sort_mode, hide_expired=prefs.hide_expired)


@router.post("/order/drag", response_model=OrderResponse)
async def reorder_drag(
    body: DragReorder, service: TempTabsService = Depends(service_dep),
):
    order = await service.reorder_drag(
        body.visible_ids, body.dragged_id, body.target_id, body.place_after,
    )
    return OrderResponse(manual_order=order)


@router.post("/order/move", response_model=OrderResponse)
async def move_item(
    body: MoveStep, service: TempTabsService = Depends(service_dep),
):
    order = await service.move_item(body.item_id, body.step)
    return OrderResponse(manual_order=order)
