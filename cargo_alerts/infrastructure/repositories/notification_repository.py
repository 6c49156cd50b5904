"""Persistence helpers for notification and alert collections."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from cargo_alerts.domain.entities import Alert, Notification, validate_kind
from cargo_alerts.infrastructure.storage import KeyValueStore
from cargo_alerts.utils import ensure_app_timezone

from .base import read_json, write_json

logger = logging.getLogger(__name__)

NOTIFICATIONS_STORAGE_KEY = "app_notifications"
ALERTS_STORAGE_KEY = "app_alerts"


class NotificationRepository:
    """Read and write whole notification/alert collections."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def list_notifications(self) -> list[Notification]:
        entries = read_json(self.store, NOTIFICATIONS_STORAGE_KEY, list, [])
        return [
            entity
            for entity in (self._to_entity(entry, alert=False) for entry in entries)
            if entity is not None
        ]

    def list_alerts(self) -> list[Alert]:
        entries = read_json(self.store, ALERTS_STORAGE_KEY, list, [])
        return [
            entity
            for entity in (self._to_entity(entry, alert=True) for entry in entries)
            if isinstance(entity, Alert)
        ]

    def save_notifications(self, notifications: Sequence[Notification]) -> None:
        write_json(
            self.store,
            NOTIFICATIONS_STORAGE_KEY,
            [serialize_entity(notification) for notification in notifications],
        )

    def save_alerts(self, alerts: Sequence[Alert]) -> None:
        write_json(self.store, ALERTS_STORAGE_KEY, [serialize_entity(alert) for alert in alerts])

    @staticmethod
    def _to_entity(entry: Any, *, alert: bool) -> Notification | None:
        if not isinstance(entry, dict):
            logger.warning("Se descarta una entrada de notificación con formato inválido")
            return None
        try:
            values = {
                "id": str(entry["id"]),
                "title": str(entry["title"]),
                "message": str(entry["message"]),
                "kind": validate_kind(entry.get("kind", "info")),
                "created_at": ensure_app_timezone(datetime.fromisoformat(entry["created_at"])),
                "read": bool(entry.get("read", False)),
                "dedup_key": entry.get("dedup_key") or None,
            }
            if alert:
                return Alert(**values, priority=int(entry.get("priority") or 0))
            return Notification(**values)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Se descarta una notificación almacenada inválida: %s", exc)
            return None


def serialize_entity(notification: Notification) -> dict[str, Any]:
    """Return the JSON-serializable representation of ``notification``."""

    payload: dict[str, Any] = {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "kind": notification.kind,
        "created_at": notification.created_at.isoformat(),
        "read": notification.read,
        "dedup_key": notification.dedup_key,
    }
    if isinstance(notification, Alert):
        payload["priority"] = notification.priority
    return payload


__all__ = [
    "NotificationRepository",
    "serialize_entity",
    "NOTIFICATIONS_STORAGE_KEY",
    "ALERTS_STORAGE_KEY",
]
