from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notification_hub.application.use_cases.notifications import (
    NotificationCenter,
    build_notification_center,
)
from notification_hub.config import get_settings
from notification_hub.infrastructure.notifications import UiConnectionManager, UiEventRelay
from notification_hub.interfaces.api.routes import register_routes

CenterFactory = Callable[[], NotificationCenter]


def create_app(center_factory: CenterFactory | None = None) -> FastAPI:
    """Create and configure the FastAPI application serving the console UI."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the notification center on startup and release it on shutdown."""

        factory = center_factory or (lambda: build_notification_center(get_settings()))
        center = factory()
        manager = UiConnectionManager()
        relay = UiEventRelay(center.dispatcher, manager)
        app.state.notification_center = center
        app.state.ui_connection_manager = manager
        try:
            yield
        finally:
            relay.dispose()
            await center.dispose()
            app.state.notification_center = None

    app = FastAPI(lifespan=lifespan)

    # The console UI is served by the Vite dev server during development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
