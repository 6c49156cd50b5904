"""Domain entity describing an externally sourced programming record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Any, Mapping

PROGRAMMING_STATUS_UNASSIGNED = "UNASSIGNED"

_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "scheduled_date": ("scheduled_date", "dateStart", "date_start"),
    "scheduled_time": ("scheduled_time", "timeStart", "time_start"),
    "status": ("status",),
    "service": ("service",),
    "reference": ("reference", "service_request"),
    "location": ("location", "ubication"),
    "client": ("client",),
}


@dataclass(frozen=True)
class ScheduledItem:
    """Service programming awaiting assignment of a work crew.

    ``scheduled_date`` and ``scheduled_time`` are wall-clock values without an
    offset; they are interpreted in the application timezone.
    """

    id: int | str | None
    scheduled_date: date | str | None
    scheduled_time: time | str | None = None
    status: str | None = None
    service: str | None = None
    reference: str | None = None
    location: str | None = None
    client: str | None = None

    @property
    def has_id(self) -> bool:
        """Whether ``id`` is a usable int or non-empty string; ``0`` counts as missing."""

        if isinstance(self.id, bool) or not isinstance(self.id, (int, str)):
            return False
        return bool(self.id)

    @property
    def is_unassigned(self) -> bool:
        return self.status == PROGRAMMING_STATUS_UNASSIGNED

    @property
    def display_time(self) -> str:
        """Return ``HH:MM`` for messages, defaulting to midnight."""

        if isinstance(self.scheduled_time, time):
            return self.scheduled_time.strftime("%H:%M")
        if self.scheduled_time:
            return str(self.scheduled_time)[:5]
        return "00:00"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScheduledItem":
        """Build an item from a backend record using either naming style."""

        values: dict[str, Any] = {}
        for field_name, aliases in _FIELD_ALIASES.items():
            for alias in aliases:
                if payload.get(alias) is not None:
                    values[field_name] = payload[alias]
                    break
        values.setdefault("id", None)
        values.setdefault("scheduled_date", None)
        return cls(**values)


__all__ = ["ScheduledItem", "PROGRAMMING_STATUS_UNASSIGNED"]
