"""Endpoints starting and stopping the signed-in user's notification session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from notification_hub.application.use_cases.notifications import NotificationCenter
from notification_hub.domain.entities import UserSession
from notification_hub.interfaces.api.dependencies import get_notification_center
from notification_hub.interfaces.api.schemas import ConnectionRead, SessionStart

router = APIRouter(prefix="/session", tags=["session"])


@router.post("", response_model=ConnectionRead, status_code=status.HTTP_201_CREATED)
async def start_session(
    payload: SessionStart,
    center: NotificationCenter = Depends(get_notification_center),
) -> ConnectionRead:
    """Connect the realtime channel for the user and load their notifications."""

    await center.start(UserSession(user_id=payload.user_id, token=payload.token))
    return ConnectionRead.from_state(center.get_connection_state())


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def stop_session(
    center: NotificationCenter = Depends(get_notification_center),
) -> Response:
    """Disconnect the channel and drop the cached notifications."""

    await center.stop()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
