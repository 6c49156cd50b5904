"""Shared fixtures for the notification engine tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from cargo_alerts.application.use_cases.notifications import NotificationStore
from cargo_alerts.domain.entities import PROGRAMMING_STATUS_UNASSIGNED, ScheduledItem
from cargo_alerts.infrastructure.repositories import (
    NotificationRepository,
    ProgrammingRegistryRepository,
    TombstoneRegistry,
)
from cargo_alerts.infrastructure.storage import InMemoryKeyValueStore

BOGOTA = ZoneInfo("America/Bogota")


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)

    def set(self, now: datetime) -> None:
        self.now = now


def make_item(item_id, scheduled_date, scheduled_time=None, status=PROGRAMMING_STATUS_UNASSIGNED, **extra):
    return ScheduledItem(
        id=item_id,
        scheduled_date=scheduled_date,
        scheduled_time=scheduled_time,
        status=status,
        **extra,
    )


@pytest.fixture(autouse=True)
def app_timezone(monkeypatch):
    """Pin the application timezone regardless of the host environment."""

    from cargo_alerts.config import reset_settings_cache
    from cargo_alerts.utils import reset_app_timezone_cache

    monkeypatch.setenv("APP_TIMEZONE", "America/Bogota")
    reset_settings_cache()
    reset_app_timezone_cache()
    yield
    reset_settings_cache()
    reset_app_timezone_cache()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 10, 8, 0, tzinfo=BOGOTA))


@pytest.fixture()
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def store(kv_store, clock) -> NotificationStore:
    return NotificationStore(
        NotificationRepository(kv_store),
        TombstoneRegistry(kv_store),
        clock=clock,
    )


@pytest.fixture()
def registries(kv_store) -> ProgrammingRegistryRepository:
    return ProgrammingRegistryRepository(kv_store)
