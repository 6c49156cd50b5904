"""Endpoints and websocket handler for dashboard notifications and alerts."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, WebSocket, WebSocketDisconnect, status

from cargo_alerts.application.use_cases.notifications import NotificationStore
from cargo_alerts.application.use_cases.programming import AlertScheduler
from cargo_alerts.infrastructure.notifications import notification_manager
from cargo_alerts.interfaces.api.dependencies import get_alert_scheduler, get_notification_store
from cargo_alerts.interfaces.api.schemas import (
    AlertCreate,
    AlertExistsResponse,
    AlertRead,
    DeduplicateResponse,
    MarkAllReadResponse,
    NotificationCreate,
    NotificationRead,
    NotificationSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def build_snapshot(store: NotificationStore) -> dict[str, list[dict]]:
    """Return both collections serialized for the websocket handshake."""

    return {
        "notifications": [
            NotificationRead.from_entity(n).model_dump(mode="json") for n in store.notifications
        ],
        "alerts": [AlertRead.from_entity(a).model_dump(mode="json") for a in store.alerts],
    }


@router.get("/", response_model=list[NotificationRead])
async def list_notifications(
    store: NotificationStore = Depends(get_notification_store),
) -> list[NotificationRead]:
    """Return the notifications, most recent first."""

    return [NotificationRead.from_entity(notification) for notification in store.notifications]


@router.get("/alerts", response_model=list[AlertRead])
async def list_alerts(
    store: NotificationStore = Depends(get_notification_store),
) -> list[AlertRead]:
    """Return the alerts ordered by priority."""

    return [AlertRead.from_entity(alert) for alert in store.alerts]


@router.get("/summary", response_model=NotificationSummary)
async def notification_summary(
    store: NotificationStore = Depends(get_notification_store),
    scheduler: AlertScheduler = Depends(get_alert_scheduler),
) -> NotificationSummary:
    return NotificationSummary(
        unread_count=store.unread_count,
        alerts_count=store.alerts_count,
        overdue_count=scheduler.overdue_count,
    )


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def create_notification(
    payload: NotificationCreate,
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationRead:
    notification = store.add_notification(
        title=payload.title,
        message=payload.message,
        kind=payload.kind,
        dedup_key=payload.dedup_key,
    )
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="La notificación fue descartada por estar duplicada o eliminada",
        )
    return NotificationRead.from_entity(notification)


@router.post("/alerts", response_model=AlertRead, status_code=status.HTTP_201_CREATED)
async def create_alert(
    payload: AlertCreate,
    store: NotificationStore = Depends(get_notification_store),
) -> AlertRead:
    alert = store.add_alert(
        title=payload.title,
        message=payload.message,
        kind=payload.kind,
        dedup_key=payload.dedup_key,
        priority=payload.priority,
    )
    if alert is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="La alerta fue eliminada por el usuario y no se volverá a mostrar",
        )
    return AlertRead.from_entity(alert)


@router.put("/read", response_model=MarkAllReadResponse)
async def mark_all_as_read(
    store: NotificationStore = Depends(get_notification_store),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=store.mark_all_as_read())


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_as_read(
    notification_id: str,
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    if not store.mark_as_read(notification_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notificación no encontrada")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/deduplicate", response_model=DeduplicateResponse)
async def deduplicate(
    store: NotificationStore = Depends(get_notification_store),
) -> DeduplicateResponse:
    """Collapse duplicated entries left by older clients."""

    return DeduplicateResponse(removed=store.remove_duplicates())


@router.get("/alerts/{dedup_key}/exists", response_model=AlertExistsResponse)
async def alert_exists(
    dedup_key: str,
    store: NotificationStore = Depends(get_notification_store),
) -> AlertExistsResponse:
    return AlertExistsResponse(dedup_key=dedup_key, exists=store.has_alert(dedup_key))


@router.delete("/alerts", status_code=status.HTTP_204_NO_CONTENT)
async def clear_alerts(
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    """Dismiss every alert; their keys will not be shown again."""

    store.clear_all_alerts()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/alerts/{dedup_key}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_alert(
    dedup_key: str,
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    if not store.remove_alert_by_key(dedup_key):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alerta no encontrada")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
async def clear_notifications(
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    store.clear_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_notification(
    notification_id: str,
    store: NotificationStore = Depends(get_notification_store),
) -> Response:
    if not store.remove_notification(notification_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notificación no encontrada")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint streaming store events to the dashboard."""

    store: NotificationStore | None = getattr(websocket.app.state, "notification_store", None)
    if store is None:
        await websocket.close(code=1011)
        return

    await notification_manager.connect(websocket)
    try:
        await websocket.send_json({"type": "init", "data": build_snapshot(store)})
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                logger.debug("Mensaje de websocket inválido ignorado")
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        notification_manager.disconnect(websocket)
    except Exception:
        notification_manager.disconnect(websocket)
        raise
