"""Endpoints and websocket handler exposing notifications to the console UI."""

from __future__ import annotations

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from notification_hub.application.use_cases.notifications import (
    NotificationCenter,
    NotificationFilter,
)
from notification_hub.infrastructure.notifications import (
    UiConnectionManager,
    serialize_notification,
)
from notification_hub.interfaces.api.dependencies import (
    get_notification_center,
    get_ui_connection_manager,
    require_active_session,
)
from notification_hub.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationRead,
    NotificationStatsRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationRead])
async def list_notifications(
    type_: str = Query("all", alias="type"),
    status_: str = Query("all", alias="status"),
    search: str = Query(""),
    center: NotificationCenter = Depends(get_notification_center),
) -> list[NotificationRead]:
    """Return the cached notifications matching the drawer filters, newest first."""

    try:
        criteria = NotificationFilter(type=type_, status=status_, search=search)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return [
        NotificationRead.from_entity(notification)
        for notification in center.filter_notifications(criteria)
    ]


@router.get("/stats", response_model=NotificationStatsRead)
async def notification_stats(
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationStatsRead:
    return NotificationStatsRead.from_stats(center.get_stats())


@router.get("/unread-count", response_model=UnreadCountRead)
async def unread_count(
    center: NotificationCenter = Depends(get_notification_center),
) -> UnreadCountRead:
    return UnreadCountRead(unread_count=center.unread_count)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    center: NotificationCenter = Depends(require_active_session),
) -> MarkAllReadResponse:
    """Mark every cached notification as read."""

    updated = await center.mark_all_as_read()
    return MarkAllReadResponse(updated=updated)


@router.patch("/{notification_id}/read", response_model=NotificationRead)
async def mark_notification_read(
    notification_id: str,
    center: NotificationCenter = Depends(require_active_session),
) -> NotificationRead:
    """Mark a notification as read locally and on the backend."""

    await center.mark_as_read(notification_id)
    notification = center.store.get(notification_id)
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
    return NotificationRead.from_entity(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    center: NotificationCenter = Depends(get_notification_center),
) -> Response:
    """Remove a notification from the local view."""

    if not center.delete_notification(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    manager: UiConnectionManager = Depends(get_ui_connection_manager),
) -> None:
    """Websocket streaming dispatcher events to a console UI view."""

    center: NotificationCenter | None = getattr(
        websocket.app.state, "notification_center", None
    )
    if center is None:
        await websocket.close(code=1011)
        return

    await manager.connect(websocket)
    try:
        await websocket.send_json(
            {
                "type": "init",
                "data": [serialize_notification(n) for n in center.notifications],
                "unreadCount": center.unread_count,
                "connection": center.get_connection_status().value,
            }
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            ids = message.get("ids", [])
            if not isinstance(ids, list):
                continue
            if message_type == "read":
                for notification_id in ids:
                    await center.mark_as_read(str(notification_id))
            elif message_type == "ack":
                for notification_id in ids:
                    center.acknowledge(str(notification_id))
    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception:
        manager.disconnect(websocket)
        raise
