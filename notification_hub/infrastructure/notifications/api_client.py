"""HTTP client for the notification endpoints of the school backend."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from notification_hub.config import Settings
from notification_hub.domain.entities import Notification

from .payloads import InvalidNotificationPayload, parse_notifications

logger = logging.getLogger(__name__)


class NotificationApiError(RuntimeError):
    """Raised when the backend rejects or fails a notification request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        failed_ids: Iterable[str] = (),
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.failed_ids = list(failed_ids)


class NotificationsApi:
    """Thin wrapper around the REST collaborator used for baseline and reads."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._token = token

    @classmethod
    def from_settings(cls, settings: Settings, *, token: str | None = None) -> "NotificationsApi":
        return cls(settings.api_base_url, token=token, timeout=settings.api_timeout)

    def set_token(self, token: str | None) -> None:
        self._token = token

    async def list(self, user_id: str, *, limit: int = 100) -> list[Notification]:
        """Return the baseline notification list for ``user_id``."""

        if not user_id:
            raise NotificationApiError("user_id is required to list notifications")
        body = await self._request(
            "GET", f"/notifications/user/{user_id}", params={"limit": limit}
        )
        data = body.get("data", []) if isinstance(body, dict) else body
        try:
            return parse_notifications(data)
        except InvalidNotificationPayload as exc:
            raise NotificationApiError(f"Malformed notification list: {exc}") from exc

    async def mark_read(self, notification_id: str) -> dict[str, Any]:
        return await self._request("PATCH", f"/notifications/{notification_id}/read")

    async def mark_all_read(self, notification_ids: Iterable[str]) -> dict[str, Any]:
        """Mark every id as read.

        The backend exposes no bulk endpoint, so each id is marked individually.
        A failure does not stop the remaining ids; the ids that could not be
        marked are reported on the raised :class:`NotificationApiError`.
        """

        updated = 0
        failed: list[str] = []
        for notification_id in notification_ids:
            try:
                await self.mark_read(notification_id)
            except NotificationApiError as exc:
                logger.warning("Failed to mark notification %s as read: %s", notification_id, exc)
                failed.append(notification_id)
            else:
                updated += 1

        if failed:
            raise NotificationApiError(
                f"Failed to mark {len(failed)} of {updated + len(failed)} notifications "
                f"as read: {', '.join(failed)}",
                failed_ids=failed,
            )
        return {"success": True, "data": {"updated": updated}}

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NotificationApiError(
                _error_message(exc.response) or str(exc),
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise NotificationApiError(str(exc) or "Something went wrong") from exc

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise NotificationApiError("Backend returned a non-JSON response") from exc
        if isinstance(body, dict) and body.get("success") is False:
            raise NotificationApiError(
                str(body.get("message") or "API request failed"),
                status_code=response.status_code,
            )
        return body


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


__all__ = ["NotificationApiError", "NotificationsApi"]
