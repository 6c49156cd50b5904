"""Deduplicated, write-through store of dashboard notifications and alerts."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from cargo_alerts.domain.entities import (
    NOTIFICATION_KIND_INFO,
    Alert,
    Notification,
    validate_kind,
)
from cargo_alerts.infrastructure.repositories import (
    NotificationRepository,
    TombstoneRegistry,
    serialize_entity,
)
from cargo_alerts.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

EVENT_NOTIFICATION_CREATED = "notification.created"
EVENT_ALERT_CREATED = "alert.created"
EVENT_NOTIFICATION_UPDATED = "notification.updated"
EVENT_NOTIFICATION_REMOVED = "notification.removed"
EVENT_NOTIFICATIONS_CLEARED = "notifications.cleared"

Clock = Callable[[], datetime]
StoreListener = Callable[[str, Any], None]


class NotificationStore:
    """In-memory notification and alert collections persisted on every change.

    Both collections are ordered most-recent-first; alerts are additionally
    kept sorted by ``priority`` (highest first). A dedup key removed by the
    user is tombstoned and never accepted again.
    """

    def __init__(
        self,
        repository: NotificationRepository,
        tombstones: TombstoneRegistry,
        *,
        clock: Clock | None = None,
        listener: StoreListener | None = None,
    ) -> None:
        self._repository = repository
        self._tombstones = tombstones
        self._clock = clock or now_in_app_timezone
        self._listener = listener
        self._notifications: list[Notification] = []
        self._alerts: list[Alert] = []
        self.reload()

    def reload(self) -> None:
        """Re-read every collection from storage and repair duplicates."""

        self._tombstones.reload()
        self._notifications = self._repository.list_notifications()
        self._alerts = self._repository.list_alerts()
        self.remove_duplicates()

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    @property
    def alerts(self) -> list[Alert]:
        return list(self._alerts)

    @property
    def unread_count(self) -> int:
        return sum(1 for notification in self._notifications if not notification.read)

    @property
    def alerts_count(self) -> int:
        return len(self._alerts)

    def is_tombstoned(self, key: str) -> bool:
        return key in self._tombstones

    def has_alert(self, key: str) -> bool:
        return any(alert.dedup_key == key for alert in self._alerts)

    def has_notification(self, key: str) -> bool:
        return any(notification.dedup_key == key for notification in self._notifications)

    def add_notification(
        self,
        *,
        title: str,
        message: str,
        kind: str = NOTIFICATION_KIND_INFO,
        dedup_key: str | None = None,
        is_alert: bool = False,
        priority: int = 0,
    ) -> Notification | None:
        """Insert a notification, replacing any entry sharing ``dedup_key``.

        Returns the created entity, or ``None`` when the request was ignored
        (tombstoned key, keyless duplicate or invalid alert).
        """

        if is_alert:
            return self.add_alert(
                title=title,
                message=message,
                kind=kind,
                dedup_key=dedup_key,
                priority=priority,
            )

        validate_kind(kind)
        dedup_key = dedup_key or None
        if dedup_key is not None and dedup_key in self._tombstones:
            logger.info(
                "La notificación con clave '%s' fue eliminada por el usuario, no se mostrará",
                dedup_key,
            )
            return None

        if dedup_key is not None:
            remaining = [n for n in self._notifications if n.dedup_key != dedup_key]
            replaced = len(self._notifications) - len(remaining)
            if replaced:
                logger.info(
                    "Reemplazando %s notificaciones con clave '%s'", replaced, dedup_key
                )
        else:
            if any(n.content_key == (title, message) for n in self._notifications):
                logger.info("Notificación duplicada ignorada: %s", title)
                return None
            remaining = list(self._notifications)

        notification = Notification(
            id=_new_id("notification"),
            title=title,
            message=message,
            kind=kind,
            created_at=self._clock(),
            dedup_key=dedup_key,
        )
        self._notifications = [notification, *remaining]
        self._repository.save_notifications(self._notifications)
        self._emit(EVENT_NOTIFICATION_CREATED, serialize_entity(notification))
        return notification

    def add_alert(
        self,
        *,
        title: str,
        message: str,
        kind: str = NOTIFICATION_KIND_INFO,
        dedup_key: str | None,
        priority: int = 0,
    ) -> Alert | None:
        """Insert an alert keyed by ``dedup_key`` and re-sort by priority."""

        if not dedup_key:
            logger.error("Las alertas deben tener una clave única: '%s' rechazada", title)
            return None
        validate_kind(kind)
        if dedup_key in self._tombstones:
            logger.info(
                "La alerta con clave '%s' fue eliminada por el usuario, no se mostrará",
                dedup_key,
            )
            return None

        remaining = [alert for alert in self._alerts if alert.dedup_key != dedup_key]
        if len(remaining) < len(self._alerts):
            logger.info("Reemplazando alerta con clave '%s'", dedup_key)

        alert = Alert(
            id=_new_id("alert"),
            title=title,
            message=message,
            kind=kind,
            created_at=self._clock(),
            dedup_key=dedup_key,
            priority=int(priority or 0),
        )
        # sorted() is stable, so equal priorities keep newest-first order.
        self._alerts = sorted([alert, *remaining], key=lambda item: item.priority, reverse=True)
        self._repository.save_alerts(self._alerts)
        self._emit(EVENT_ALERT_CREATED, serialize_entity(alert))
        return alert

    def mark_as_read(self, notification_id: str) -> bool:
        """Mark the entry with ``notification_id`` as read in either collection."""

        entry, collection = self._find_by_id(notification_id)
        if entry is None:
            return False
        if not entry.read:
            entry.read = True
            self._save(collection)
            self._emit(EVENT_NOTIFICATION_UPDATED, {"ids": [entry.id], "read": True})
        return True

    def mark_all_as_read(self) -> int:
        updated: list[str] = []
        for collection in (self._notifications, self._alerts):
            changed = False
            for entry in collection:
                if not entry.read:
                    entry.read = True
                    updated.append(entry.id)
                    changed = True
            if changed:
                self._save(collection)
        if updated:
            self._emit(EVENT_NOTIFICATION_UPDATED, {"ids": updated, "read": True})
        return len(updated)

    def remove_notification(self, notification_id: str) -> bool:
        """Remove an entry by id, tombstoning its dedup key."""

        entry, collection = self._find_by_id(notification_id)
        if entry is None:
            return False
        if entry.dedup_key:
            self._tombstones.add(entry.dedup_key)
        if collection is self._alerts:
            self._alerts = [alert for alert in self._alerts if alert.id != notification_id]
            self._repository.save_alerts(self._alerts)
        else:
            self._notifications = [
                n for n in self._notifications if n.id != notification_id
            ]
            self._repository.save_notifications(self._notifications)
        self._emit(
            EVENT_NOTIFICATION_REMOVED,
            {"id": entry.id, "dedup_key": entry.dedup_key},
        )
        return True

    remove_by_id = remove_notification

    def remove_alert_by_key(self, key: str) -> bool:
        removed = [alert for alert in self._alerts if alert.dedup_key == key]
        if not removed:
            logger.info("No se encontró alerta con clave '%s'", key)
            return False
        self._tombstones.add(key)
        self._alerts = [alert for alert in self._alerts if alert.dedup_key != key]
        self._repository.save_alerts(self._alerts)
        logger.info("Eliminada alerta con clave '%s'", key)
        for alert in removed:
            self._emit(EVENT_NOTIFICATION_REMOVED, {"id": alert.id, "dedup_key": key})
        return True

    def clear_all(self) -> None:
        """Empty both collections. Keys are not tombstoned."""

        self._notifications = []
        self._alerts = []
        self._repository.save_notifications(self._notifications)
        self._repository.save_alerts(self._alerts)
        self._emit(EVENT_NOTIFICATIONS_CLEARED, {"scope": "all"})

    def clear_all_alerts(self) -> None:
        """Tombstone every alert key and empty the alert collection."""

        self._tombstones.add_many([alert.dedup_key for alert in self._alerts if alert.dedup_key])
        self._alerts = []
        self._repository.save_alerts(self._alerts)
        self._emit(EVENT_NOTIFICATIONS_CLEARED, {"scope": "alerts"})

    def remove_duplicates(self) -> int:
        """Collapse duplicated entries and return how many were removed.

        Keyed notifications collapse by key and keyless ones by
        ``(title, message)``; the first occurrence wins. Alerts without a key
        are discarded.
        """

        seen_keys: set[str] = set()
        seen_content: set[tuple[str, str]] = set()
        unique_notifications: list[Notification] = []
        for notification in self._notifications:
            if notification.dedup_key:
                if notification.dedup_key in seen_keys:
                    continue
                seen_keys.add(notification.dedup_key)
            else:
                if notification.content_key in seen_content:
                    continue
                seen_content.add(notification.content_key)
            unique_notifications.append(notification)

        seen_alert_keys: set[str] = set()
        unique_alerts: list[Alert] = []
        for alert in self._alerts:
            if not alert.dedup_key or alert.dedup_key in seen_alert_keys:
                continue
            seen_alert_keys.add(alert.dedup_key)
            unique_alerts.append(alert)

        removed_notifications = len(self._notifications) - len(unique_notifications)
        removed_alerts = len(self._alerts) - len(unique_alerts)
        if removed_notifications:
            logger.info("Eliminados %s duplicados de notificaciones", removed_notifications)
            self._notifications = unique_notifications
            self._repository.save_notifications(self._notifications)
        if removed_alerts:
            logger.info("Eliminados %s duplicados de alertas", removed_alerts)
            self._alerts = unique_alerts
            self._repository.save_alerts(self._alerts)
        return removed_notifications + removed_alerts

    def _find_by_id(
        self, notification_id: str
    ) -> tuple[Notification | None, list[Any] | None]:
        for collection in (self._notifications, self._alerts):
            for entry in collection:
                if entry.id == notification_id:
                    return entry, collection
        return None, None

    def _save(self, collection: list[Any] | None) -> None:
        if collection is self._alerts:
            self._repository.save_alerts(self._alerts)
        else:
            self._repository.save_notifications(self._notifications)

    def _emit(self, event_type: str, payload: Any) -> None:
        if self._listener is None:
            return
        try:
            self._listener(event_type, payload)
        except Exception:
            logger.exception("Error al publicar el evento %s", event_type)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


__all__ = [
    "NotificationStore",
    "EVENT_NOTIFICATION_CREATED",
    "EVENT_ALERT_CREATED",
    "EVENT_NOTIFICATION_UPDATED",
    "EVENT_NOTIFICATION_REMOVED",
    "EVENT_NOTIFICATIONS_CLEARED",
]
