"""Domain entities exposed by the application."""

from .notification import (
    NOTIFICATION_KIND_ERROR,
    NOTIFICATION_KIND_INFO,
    NOTIFICATION_KIND_SUCCESS,
    NOTIFICATION_KIND_WARNING,
    NOTIFICATION_KINDS,
    Alert,
    Notification,
    validate_kind,
)
from .scheduled_item import PROGRAMMING_STATUS_UNASSIGNED, ScheduledItem
from .programming_check import (
    BUCKET_FUTURE,
    BUCKET_PAST,
    BUCKET_TODAY_OVERDUE,
    BUCKET_TODAY_PENDING,
    NOTIFIED_BUCKETS,
    ClassificationResult,
    ImminentItem,
    TickReport,
)

__all__ = [
    "Alert",
    "Notification",
    "NOTIFICATION_KIND_INFO",
    "NOTIFICATION_KIND_SUCCESS",
    "NOTIFICATION_KIND_WARNING",
    "NOTIFICATION_KIND_ERROR",
    "NOTIFICATION_KINDS",
    "validate_kind",
    "ScheduledItem",
    "PROGRAMMING_STATUS_UNASSIGNED",
    "BUCKET_PAST",
    "BUCKET_TODAY_OVERDUE",
    "BUCKET_TODAY_PENDING",
    "BUCKET_FUTURE",
    "NOTIFIED_BUCKETS",
    "ClassificationResult",
    "ImminentItem",
    "TickReport",
]
