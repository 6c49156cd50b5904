"""FastAPI application exposing the notification store and alert scheduler."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cargo_alerts.application.use_cases.notifications import (
    EVENT_ALERT_CREATED,
    NotificationStore,
    alert_sound_volume,
)
from cargo_alerts.application.use_cases.programming import AlertScheduler
from cargo_alerts.application.use_cases.programming.scheduler import Clock
from cargo_alerts.config import Settings, get_settings
from cargo_alerts.infrastructure.notifications import notification_publisher
from cargo_alerts.infrastructure.programming_source import (
    HttpScheduledItemSource,
    ScheduledItemSource,
    StaticScheduledItemSource,
)
from cargo_alerts.infrastructure.repositories import (
    NotificationRepository,
    ProgrammingRegistryRepository,
    TombstoneRegistry,
)
from cargo_alerts.infrastructure.storage import KeyValueStore, build_key_value_store
from cargo_alerts.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def publish_store_event(event_type: str, payload: Any) -> None:
    """Forward store events to websocket subscribers."""

    if event_type == EVENT_ALERT_CREATED and isinstance(payload, dict):
        payload = {**payload, "sound_volume": alert_sound_volume(payload.get("priority", 0))}
    notification_publisher.dispatch(event_type, payload)


def create_app(
    settings: Settings | None = None,
    *,
    source: ScheduledItemSource | None = None,
    key_value_store: KeyValueStore | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Construye el almacén y el programador al arrancar y los detiene al cerrar."""

        logging.basicConfig(level=settings.log_level.upper())
        kv_store = key_value_store or build_key_value_store(settings)
        store = NotificationStore(
            NotificationRepository(kv_store),
            TombstoneRegistry(kv_store),
            clock=clock,
            listener=publish_store_event,
        )

        programming_source = source
        if programming_source is None:
            if settings.programming_api_url:
                programming_source = HttpScheduledItemSource.from_settings(settings)
            else:
                programming_source = StaticScheduledItemSource()

        scheduler = AlertScheduler.from_settings(
            settings,
            source=programming_source,
            store=store,
            registries=ProgrammingRegistryRepository(kv_store),
            clock=clock,
        )
        subscribe = getattr(programming_source, "subscribe", None)
        if subscribe is not None:
            subscribe(scheduler.source_loaded)

        app.state.notification_store = store
        app.state.alert_scheduler = scheduler
        app.state.programming_source = programming_source

        if isinstance(programming_source, HttpScheduledItemSource):
            await programming_source.refresh()
        scheduler.start()
        logger.info("Servicio de notificaciones iniciado (almacenamiento: %s)", settings.storage_backend)
        try:
            yield
        finally:
            await scheduler.stop()
            app.state.notification_store = None
            app.state.alert_scheduler = None
            app.state.programming_source = None

    app = FastAPI(title="Cargo Alerts", lifespan=lifespan)
    app.state.settings = settings

    # Autoriza peticiones desde el tablero de operaciones.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
