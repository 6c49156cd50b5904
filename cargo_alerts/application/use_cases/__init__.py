"""Aggregate application use cases."""

from .notifications import NotificationStore
from .programming import AlertScheduler, classify

__all__ = [
    "AlertScheduler",
    "NotificationStore",
    "classify",
]
