"""Maintenance Routes: refresh, purge, export, wipe, badge and user settings.

Invariants:
    - POST /maintenance/cleanup is non-destructive (badge refresh only)
    - POST /maintenance/purge is the only endpoint that deletes expired items
    - POST /maintenance/wipe clears items AND the manual order
"""

from fastapi import APIRouter, Depends, Response, status

from temptabs.api.deps import container_dep, coordinator_dep, service_dep
from temptabs.core.errors import InvalidInputError
from temptabs.schemas.view import (
    BadgeResponse, PurgeResponse, SettingsResponse, SettingsUpdate,
)
from temptabs.services.badge_coordinator import BadgeCleanupCoordinator
from temptabs.services.container import Container
from temptabs.services.temptabs_service import TempTabsService

router = APIRouter(prefix="/api/v1", tags=["maintenance"])

EXPORT_FILENAME = "temptabs-export.json"


@router.post("/maintenance/cleanup", response_model=BadgeResponse)
async def request_cleanup(
    coordinator: BadgeCleanupCoordinator = Depends(coordinator_dep),
):
    state = await coordinator.request_cleanup()
    return BadgeResponse.from_state(state)


@router.post("/maintenance/purge", response_model=PurgeResponse)
async def request_purge(
    coordinator: BadgeCleanupCoordinator = Depends(coordinator_dep),
):
    result = await coordinator.request_purge()
    return PurgeResponse(
        removed=result.removed, badge=BadgeResponse.from_state(result.badge),
    )


@router.get("/maintenance/export")
async def export_all(service: TempTabsService = Depends(service_dep)):
    payload = await service.export_all()
    return Response(
        content=payload,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/maintenance/wipe", status_code=status.HTTP_204_NO_CONTENT)
async def wipe_all(
    service: TempTabsService = Depends(service_dep),
    coordinator: BadgeCleanupCoordinator = Depends(coordinator_dep),
):
    await service.wipe_all()
    await coordinator.request_cleanup()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/badge", response_model=BadgeResponse)
async def current_badge(container: Container = Depends(container_dep)):
    return BadgeResponse.from_state(container.badge.state)


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(service: TempTabsService = Depends(service_dep)):
    return SettingsResponse.from_settings(await service.get_settings())


@router.patch("/settings", response_model=SettingsResponse)
async def update_settings(
    body: SettingsUpdate, service: TempTabsService = Depends(service_dep),
):
    if body.retention_hours is None and body.popup_width is None:
        raise InvalidInputError("No settings to update", field="body")
    merged = await service.update_settings(body.retention_hours, body.popup_width)
    return SettingsResponse.from_settings(merged)
