"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status

from cargo_alerts.application.use_cases.notifications import NotificationStore
from cargo_alerts.application.use_cases.programming import AlertScheduler
from cargo_alerts.infrastructure.programming_source import ScheduledItemSource


def _get_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="El servicio de notificaciones no está inicializado",
        )
    return value


def get_notification_store(request: Request) -> NotificationStore:
    """Return the store created during application startup."""

    return _get_state(request, "notification_store")


def get_alert_scheduler(request: Request) -> AlertScheduler:
    return _get_state(request, "alert_scheduler")


def get_programming_source(request: Request) -> ScheduledItemSource:
    return _get_state(request, "programming_source")
