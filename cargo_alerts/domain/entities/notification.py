"""Domain entities representing dashboard notifications and alerts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

NOTIFICATION_KIND_INFO = "info"
NOTIFICATION_KIND_SUCCESS = "success"
NOTIFICATION_KIND_WARNING = "warning"
NOTIFICATION_KIND_ERROR = "error"
NOTIFICATION_KINDS = frozenset(
    {
        NOTIFICATION_KIND_INFO,
        NOTIFICATION_KIND_SUCCESS,
        NOTIFICATION_KIND_WARNING,
        NOTIFICATION_KIND_ERROR,
    }
)


@dataclass
class Notification:
    """User-facing message shown in the dashboard notification panel.

    ``dedup_key`` identifies the semantic event behind the message (for example
    ``"past-42"``). At most one live entry exists per key.
    """

    id: str
    title: str
    message: str
    kind: str
    created_at: datetime
    read: bool = False
    dedup_key: str | None = None

    @property
    def content_key(self) -> tuple[str, str]:
        """Return the pair used to detect keyless duplicates."""

        return (self.title, self.message)


@dataclass
class Alert(Notification):
    """Higher-visibility notification ordered by ``priority``."""

    priority: int = 0


def validate_kind(kind: str) -> str:
    """Return ``kind`` if it is a known notification kind."""

    if kind not in NOTIFICATION_KINDS:
        msg = f"Unknown notification kind '{kind}'"
        raise ValueError(msg)
    return kind


__all__ = [
    "Alert",
    "Notification",
    "NOTIFICATION_KIND_INFO",
    "NOTIFICATION_KIND_SUCCESS",
    "NOTIFICATION_KIND_WARNING",
    "NOTIFICATION_KIND_ERROR",
    "NOTIFICATION_KINDS",
    "validate_kind",
]
