"""Value objects produced while checking programming records against the clock."""

from __future__ import annotations

from dataclasses import dataclass, field

from .scheduled_item import ScheduledItem

BUCKET_PAST = "past"
BUCKET_TODAY_OVERDUE = "today-overdue"
BUCKET_TODAY_PENDING = "today-pending"
BUCKET_FUTURE = "future"
NOTIFIED_BUCKETS = (BUCKET_PAST, BUCKET_TODAY_OVERDUE, BUCKET_TODAY_PENDING)


@dataclass(frozen=True)
class ImminentItem:
    """Item whose start falls inside the lookahead window."""

    item: ScheduledItem
    minutes_until_start: float


@dataclass
class ClassificationResult:
    """Partition of programming records relative to a reference instant."""

    past: list[ScheduledItem] = field(default_factory=list)
    today_overdue: list[ScheduledItem] = field(default_factory=list)
    today_pending: list[ScheduledItem] = field(default_factory=list)
    future: list[ScheduledItem] = field(default_factory=list)
    imminent: list[ImminentItem] = field(default_factory=list)

    def bucket(self, name: str) -> list[ScheduledItem]:
        """Return the list stored for bucket ``name``."""

        return {
            BUCKET_PAST: self.past,
            BUCKET_TODAY_OVERDUE: self.today_overdue,
            BUCKET_TODAY_PENDING: self.today_pending,
            BUCKET_FUTURE: self.future,
        }[name]

    @property
    def total(self) -> int:
        return (
            len(self.past)
            + len(self.today_overdue)
            + len(self.today_pending)
            + len(self.future)
        )


@dataclass
class TickReport:
    """Outcome of one accepted programming check."""

    past: int = 0
    today_overdue: int = 0
    today_pending: int = 0
    future: int = 0
    emitted_keys: list[str] = field(default_factory=list)
    imminent_keys: list[str] = field(default_factory=list)
    summary_keys: list[str] = field(default_factory=list)
    deferred: int = 0

    @property
    def overdue_count(self) -> int:
        return self.past + self.today_overdue


__all__ = [
    "BUCKET_PAST",
    "BUCKET_TODAY_OVERDUE",
    "BUCKET_TODAY_PENDING",
    "BUCKET_FUTURE",
    "NOTIFIED_BUCKETS",
    "ClassificationResult",
    "ImminentItem",
    "TickReport",
]
