"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status
from fastapi.requests import HTTPConnection

from notification_hub.application.use_cases.notifications import NotificationCenter
from notification_hub.infrastructure.notifications import UiConnectionManager


def get_notification_center(request: Request) -> NotificationCenter:
    """Return the :class:`NotificationCenter` created for this application."""

    center = getattr(request.app.state, "notification_center", None)
    if center is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification center is not running",
        )
    return center


def require_active_session(request: Request) -> NotificationCenter:
    """Ensure a user session has been started on the notification center."""

    center = get_notification_center(request)
    if center.session is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No active notification session",
        )
    return center


def get_ui_connection_manager(connection: HTTPConnection) -> UiConnectionManager:
    """Return the pool of console UI websockets; usable from websocket routes."""

    return connection.app.state.ui_connection_manager
