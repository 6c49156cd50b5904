"""Pydantic models describing notification and alert payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from cargo_alerts.application.use_cases.notifications import alert_sound_volume
from cargo_alerts.domain.entities import Alert, Notification

NotificationKind = Literal["info", "success", "warning", "error"]


class NotificationCreate(BaseModel):
    """Payload used to create a notification from another producer."""

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    kind: NotificationKind = "info"
    dedup_key: str | None = Field(
        default=None,
        max_length=200,
        description="Clave de deduplicación; reemplaza la entrada existente con la misma clave",
    )


class AlertCreate(BaseModel):
    """Payload used to create an alert. Alerts always carry a dedup key."""

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    kind: NotificationKind = "info"
    dedup_key: str = Field(..., min_length=1, max_length=200)
    priority: int = Field(default=0, description="Las alertas con mayor prioridad se muestran primero")


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    title: str
    message: str
    kind: NotificationKind
    created_at: datetime
    read: bool = False
    dedup_key: str | None = None

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        return cls(
            id=notification.id,
            title=notification.title,
            message=notification.message,
            kind=notification.kind,
            created_at=notification.created_at,
            read=notification.read,
            dedup_key=notification.dedup_key,
        )


class AlertRead(NotificationRead):
    """Alert representation including its priority and sound hint."""

    priority: int = 0
    sound_volume: float

    @classmethod
    def from_entity(cls, alert: Alert) -> "AlertRead":
        return cls(
            id=alert.id,
            title=alert.title,
            message=alert.message,
            kind=alert.kind,
            created_at=alert.created_at,
            read=alert.read,
            dedup_key=alert.dedup_key,
            priority=alert.priority,
            sound_volume=alert_sound_volume(alert.priority),
        )


class NotificationSummary(BaseModel):
    """Counters displayed next to the notification bell."""

    unread_count: int
    alerts_count: int
    overdue_count: int


class AlertExistsResponse(BaseModel):
    dedup_key: str
    exists: bool


class MarkAllReadResponse(BaseModel):
    updated: int


class DeduplicateResponse(BaseModel):
    removed: int


__all__ = [
    "NotificationKind",
    "NotificationCreate",
    "AlertCreate",
    "NotificationRead",
    "AlertRead",
    "NotificationSummary",
    "AlertExistsResponse",
    "MarkAllReadResponse",
    "DeduplicateResponse",
]
