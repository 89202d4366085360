"""Item Routes: add, rename, set expiry and delete saved links.

Invariants:
    - DELETE is idempotent: 204 whether or not the item still exists
    - Routes that must return an item body answer 404 for an unknown id
    - add-page / add-link with no usable url answer 204 with no body (nothing saved)
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from temptabs.api.deps import service_dep
from temptabs.core.errors import ItemNotFoundError
from temptabs.schemas.items import (
    ExpiryUpdate, ItemCreate, ItemRename, ItemResponse, LinkAdd, PageAdd,
)
from temptabs.services.temptabs_service import TempTabsService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/items", tags=["items"])


@router.post(
    "", response_model=ItemResponse, status_code=status.HTTP_201_CREATED,
)
async def add_item(
    body: ItemCreate, service: TempTabsService = Depends(service_dep),
):
    """Save a link with the default retention."""
    item = await service.add_item(body.url, body.title)
    return ItemResponse.from_item(item, service.clock.now())


@router.post("/page", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def add_page(
    body: PageAdd, service: TempTabsService = Depends(service_dep),
):
    """Context-menu 'add this page'."""
    item = await service.add_page(body.page_url, body.tab_url, body.tab_title)
    if item is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return ItemResponse.from_item(item, service.clock.now())


@router.post("/link", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def add_link(
    body: LinkAdd, service: TempTabsService = Depends(service_dep),
):
    """Context-menu 'add link'."""
    item = await service.add_link(body.link_url, body.link_text)
    if item is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return ItemResponse.from_item(item, service.clock.now())


@router.put("/{item_id}/expiry", response_model=ItemResponse)
async def set_expiry(
    item_id: str,
    body: ExpiryUpdate,
    service: TempTabsService = Depends(service_dep),
):
    item = await service.set_item_expiry(item_id, body.choice)
    if item is None:
        raise ItemNotFoundError(item_id)
    return ItemResponse.from_item(item, service.clock.now())


@router.patch("/{item_id}", response_model=ItemResponse)
async def rename_item(
    item_id: str,
    body: ItemRename,
    service: TempTabsService = Depends(service_dep),
):
    item = await service.rename_item(item_id, body.title)
    if item is None:
        raise ItemNotFoundError(item_id)
    return ItemResponse.from_item(item, service.clock.now())


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str, service: TempTabsService = Depends(service_dep),
):
    """Delete an item. Already-deleted ids are not an error."""
    removed = await service.remove_item(item_id)
    if not removed:
        logger.debug(f"Delete for unknown item {item_id}", extra={"item_id": item_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
