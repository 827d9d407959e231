"""Connection indicator and desktop permission endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from notification_hub.application.use_cases.notifications import NotificationCenter
from notification_hub.interfaces.api.dependencies import get_notification_center
from notification_hub.interfaces.api.schemas import ConnectionRead, PermissionRead

router = APIRouter(tags=["connection"])


@router.get("/connection", response_model=ConnectionRead)
async def read_connection(
    center: NotificationCenter = Depends(get_notification_center),
) -> ConnectionRead:
    """Return the non-blocking connection indicator state."""

    return ConnectionRead.from_state(center.get_connection_state())


@router.post("/desktop/permission", response_model=PermissionRead)
async def request_desktop_permission(
    center: NotificationCenter = Depends(get_notification_center),
) -> PermissionRead:
    """Ask for desktop notification permission after a user gesture."""

    granted = await center.request_permission()
    return PermissionRead(granted=granted, permission=center.desktop_permission)
