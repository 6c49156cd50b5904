"""Classify programming records relative to the current instant."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping
from datetime import date, datetime, time, tzinfo

from cargo_alerts.domain.entities import (
    BUCKET_PAST,
    BUCKET_TODAY_OVERDUE,
    BUCKET_TODAY_PENDING,
    ClassificationResult,
    ImminentItem,
    ScheduledItem,
)
from cargo_alerts.utils import combine_in_app_timezone, ensure_app_timezone, get_app_timezone

logger = logging.getLogger(__name__)

DEFAULT_IMMINENT_WINDOW_MINUTES = 5


def parse_scheduled_date(value: date | str | None) -> date | None:
    """Return the calendar date of ``value``; ISO datetimes keep only the date."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def parse_scheduled_time(value: time | str | None) -> time:
    """Return the wall-clock time of ``value``, midnight when missing."""

    if value is None or value == "":
        return time(0, 0)
    if isinstance(value, time):
        return value.replace(tzinfo=None)
    hours, _, rest = str(value).strip().partition(":")
    minutes = rest.split(":", 1)[0] if rest else "0"
    return time(int(hours), int(minutes or 0))


def scheduled_instant(item: ScheduledItem, tz: tzinfo | None = None) -> datetime | None:
    """Return the aware start instant of ``item`` or ``None`` if it has no date."""

    day = parse_scheduled_date(item.scheduled_date)
    if day is None:
        return None
    return combine_in_app_timezone(day, parse_scheduled_time(item.scheduled_time), tz)


def classify(
    items: Iterable[ScheduledItem],
    now: datetime,
    *,
    notified: Mapping[str, Collection[int | str]] | None = None,
    imminent_sent: Collection[int | str] | None = None,
    imminent_window_minutes: float = DEFAULT_IMMINENT_WINDOW_MINUTES,
    tz: tzinfo | None = None,
) -> ClassificationResult:
    """Partition unassigned ``items`` into past, today and future buckets.

    ``notified`` maps a bucket name to the ids already processed for it; those
    items are left out of that bucket. Items that have not started yet and
    begin within ``imminent_window_minutes`` are also reported in
    ``imminent`` unless their id is in ``imminent_sent``. When several records
    share an id only the first valid one is classified.
    """

    tz = tz or get_app_timezone()
    now = ensure_app_timezone(now, tz)
    notified = notified or {}
    imminent_sent = imminent_sent or ()
    result = ClassificationResult()
    seen: set[int | str] = set()

    for item in items:
        if not item.scheduled_date or not item.has_id or not item.is_unassigned:
            continue

        try:
            instant = scheduled_instant(item, tz)
        except (TypeError, ValueError) as exc:
            logger.debug("Fecha u hora inválida en la programación %s: %s", item.id, exc)
            continue
        if instant is None:
            continue
        if item.id in seen:
            logger.debug("Programación %s repetida; se usa el primer registro", item.id)
            continue
        seen.add(item.id)

        if instant.date() < now.date():
            bucket = BUCKET_PAST
        elif instant.date() == now.date():
            bucket = BUCKET_TODAY_OVERDUE if instant < now else BUCKET_TODAY_PENDING
        else:
            bucket = None

        if bucket is None:
            result.future.append(item)
        elif item.id not in notified.get(bucket, ()):
            result.bucket(bucket).append(item)

        if instant < now or item.id in imminent_sent:
            continue
        minutes_until_start = (instant - now).total_seconds() / 60
        if minutes_until_start <= imminent_window_minutes:
            result.imminent.append(ImminentItem(item, minutes_until_start))

    return result


__all__ = [
    "classify",
    "parse_scheduled_date",
    "parse_scheduled_time",
    "scheduled_instant",
    "DEFAULT_IMMINENT_WINDOW_MINUTES",
]
