"""Use cases for the notification and alert store."""

from .sound import alert_sound_volume
from .store import (
    EVENT_ALERT_CREATED,
    EVENT_NOTIFICATION_CREATED,
    EVENT_NOTIFICATION_REMOVED,
    EVENT_NOTIFICATION_UPDATED,
    EVENT_NOTIFICATIONS_CLEARED,
    NotificationStore,
)

__all__ = [
    "NotificationStore",
    "alert_sound_volume",
    "EVENT_ALERT_CREATED",
    "EVENT_NOTIFICATION_CREATED",
    "EVENT_NOTIFICATION_REMOVED",
    "EVENT_NOTIFICATION_UPDATED",
    "EVENT_NOTIFICATIONS_CLEARED",
]
