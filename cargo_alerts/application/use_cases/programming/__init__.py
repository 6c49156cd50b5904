"""Use cases that turn programming records into notifications."""

from .classifier import (
    DEFAULT_IMMINENT_WINDOW_MINUTES,
    classify,
    parse_scheduled_date,
    parse_scheduled_time,
    scheduled_instant,
)
from .scheduler import (
    FUTURE_SUMMARY_KEY,
    IMMINENT_ALERT_PRIORITY,
    PAST_SUMMARY_KEY,
    TODAY_PENDING_ALERT_PRIORITY,
    TODAY_SUMMARY_KEY,
    AlertScheduler,
)

__all__ = [
    "AlertScheduler",
    "classify",
    "parse_scheduled_date",
    "parse_scheduled_time",
    "scheduled_instant",
    "DEFAULT_IMMINENT_WINDOW_MINUTES",
    "PAST_SUMMARY_KEY",
    "TODAY_SUMMARY_KEY",
    "FUTURE_SUMMARY_KEY",
    "IMMINENT_ALERT_PRIORITY",
    "TODAY_PENDING_ALERT_PRIORITY",
]
