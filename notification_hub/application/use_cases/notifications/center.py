"""Composition of the realtime engine into a single façade for the console UI."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from notification_hub.config import Settings, get_settings
from notification_hub.domain.entities import (
    ConnectionState,
    ConnectionStatus,
    EventKind,
    Notification,
    UserSession,
)
from notification_hub.infrastructure.notifications import (
    ConnectionManager,
    DesktopNotifier,
    DesktopPlatform,
    EventDispatcher,
    NotificationApiError,
    NotificationsApi,
    Scheduler,
    Subscriber,
    TransportFactory,
    Unsubscribe,
)

from .filters import NotificationFilter, NotificationStats, compute_stats, filter_notifications
from .store import NotificationStore

logger = logging.getLogger(__name__)


class NotificationCenter:
    """Wire the dispatcher, connection, store and desktop notifier together.

    Instances are created explicitly and handed to whoever needs them; there is
    no shared module-level service. Local reads and deletes are optimistic and
    are not rolled back when the backend call fails.
    """

    def __init__(
        self,
        *,
        api: NotificationsApi,
        connection: ConnectionManager,
        dispatcher: EventDispatcher,
        notifier: DesktopNotifier,
        store: NotificationStore | None = None,
        baseline_limit: int = 100,
        owns_api: bool = False,
    ) -> None:
        self._api = api
        self._connection = connection
        self._dispatcher = dispatcher
        self._notifier = notifier
        self._store = store or NotificationStore()
        self._baseline_limit = baseline_limit
        self._owns_api = owns_api
        self._session: UserSession | None = None
        self._loading = False
        self._disposed = False

    @property
    def notifications(self) -> list[Notification]:
        return self._store.all()

    @property
    def unread_count(self) -> int:
        return self._store.unread_count()

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def session(self) -> UserSession | None:
        return self._session

    @property
    def store(self) -> NotificationStore:
        return self._store

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    async def start(self, session: UserSession) -> None:
        """Open the realtime channel for ``session`` and load the baseline."""

        if self._disposed:
            raise RuntimeError("NotificationCenter has been disposed")
        if self._session is not None and self._session != session:
            await self.stop()

        self._session = session
        self._api.set_token(session.token)
        self._store.attach(self._dispatcher)
        await self._connection.connect(session)
        await self.refetch()

    async def stop(self) -> None:
        """Close the channel and forget the signed-in user's notifications."""

        self._store.detach()
        await self._connection.disconnect()
        self._session = None
        self._store = NotificationStore()
        self._api.set_token(None)

    async def refetch(self) -> bool:
        """Reload the baseline; on failure the cached notifications stay visible."""

        session = self._session
        if session is None:
            return False

        self._loading = True
        try:
            baseline = await self._api.list(session.user_id, limit=self._baseline_limit)
        except NotificationApiError as exc:
            logger.warning("Failed to fetch notifications for user %s: %s", session.user_id, exc)
            return False
        finally:
            self._loading = False

        self._store.hydrate(baseline)
        return True

    async def mark_as_read(self, notification_id: str) -> bool:
        """Mark one notification as read locally, then on the server."""

        if notification_id not in self._store:
            return False

        changed = self._store.mark_as_read(notification_id)
        self._connection.send_read(notification_id)
        try:
            await self._api.mark_read(notification_id)
        except NotificationApiError as exc:
            logger.error("Failed to mark notification %s as read: %s", notification_id, exc)
        return changed

    async def mark_all_as_read(self) -> list[str]:
        """Mark every unread notification as read and return the affected ids."""

        changed = self._store.mark_all_as_read()
        if not changed:
            return changed
        try:
            await self._api.mark_all_read(changed)
        except NotificationApiError as exc:
            logger.error("Failed to mark %s notifications as read: %s", len(changed), exc)
        return changed

    def delete_notification(self, notification_id: str) -> bool:
        return self._store.delete_local(notification_id)

    def filter_notifications(
        self, criteria: NotificationFilter | Mapping[str, Any] | None = None
    ) -> list[Notification]:
        return filter_notifications(self._store.all(), criteria)

    def get_stats(self) -> NotificationStats:
        return compute_stats(self._store.all())

    async def request_permission(self) -> bool:
        return await self._notifier.request_permission()

    @property
    def desktop_permission(self) -> str:
        return self._notifier.permission

    def get_connection_status(self) -> ConnectionStatus:
        return self._connection.get_status()

    def get_connection_state(self) -> ConnectionState:
        return self._connection.get_state()

    def get_reconnect_attempts(self) -> int:
        return self._connection.reconnect_attempts

    def acknowledge(self, notification_id: str) -> bool:
        return self._connection.acknowledge(notification_id)

    def subscribe(self, kind: EventKind | str, callback: Subscriber) -> Unsubscribe:
        return self._dispatcher.subscribe(kind, callback)

    async def dispose(self) -> None:
        """Release subscriptions, timers and the transport; safe to call twice."""

        if self._disposed:
            return
        self._disposed = True
        self._store.detach()
        self._notifier.dispose()
        await self._connection.dispose()
        self._session = None
        if self._owns_api:
            await self._api.aclose()


def build_notification_center(
    settings: Settings | None = None,
    *,
    api: NotificationsApi | None = None,
    transport_factory: TransportFactory | None = None,
    platform: DesktopPlatform | None = None,
    scheduler: Scheduler | None = None,
    on_navigate: Callable[[str], Any] | None = None,
) -> NotificationCenter:
    """Create a fully wired :class:`NotificationCenter` from ``settings``."""

    settings = settings or get_settings()
    dispatcher = EventDispatcher()
    connection = ConnectionManager.from_settings(
        dispatcher, settings, transport_factory=transport_factory, scheduler=scheduler
    )
    notifier = DesktopNotifier.from_settings(
        dispatcher, settings, platform=platform, scheduler=scheduler, on_navigate=on_navigate
    )
    return NotificationCenter(
        api=api or NotificationsApi.from_settings(settings),
        connection=connection,
        dispatcher=dispatcher,
        notifier=notifier,
        baseline_limit=settings.baseline_limit,
        owns_api=api is None,
    )


__all__ = ["NotificationCenter", "build_notification_center"]
