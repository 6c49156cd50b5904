"""Tests for the repositories persisted through the key-value store."""

from __future__ import annotations

import json
from datetime import datetime

from cargo_alerts.domain.entities import Alert, Notification
from cargo_alerts.infrastructure.repositories import (
    NotificationRepository,
    ProgrammingRegistryRepository,
    TombstoneRegistry,
    serialize_entity,
)
from cargo_alerts.infrastructure.repositories.notification_repository import (
    ALERTS_STORAGE_KEY,
    NOTIFICATIONS_STORAGE_KEY,
)
from cargo_alerts.infrastructure.repositories.programming_registry_repository import (
    IMMINENT_SENT_STORAGE_KEY,
    NOTIFIED_IDS_STORAGE_KEY,
)
from cargo_alerts.infrastructure.repositories.tombstone_repository import TOMBSTONES_STORAGE_KEY

from conftest import BOGOTA


def test_serialize_entity_includes_priority_for_alerts() -> None:
    created_at = datetime(2024, 1, 10, 8, 0, tzinfo=BOGOTA)
    notification = Notification("n1", "T", "M", "info", created_at)
    alert = Alert("a1", "T", "M", "warning", created_at, dedup_key="k", priority=5)

    assert serialize_entity(notification) == {
        "id": "n1",
        "title": "T",
        "message": "M",
        "kind": "info",
        "created_at": "2024-01-10T08:00:00-05:00",
        "read": False,
        "dedup_key": None,
    }
    assert serialize_entity(alert)["priority"] == 5


def test_invalid_entries_are_skipped(kv_store, caplog) -> None:
    kv_store.set(
        NOTIFICATIONS_STORAGE_KEY,
        json.dumps(
            [
                "texto suelto",
                {"id": "n1", "title": "T"},
                {"id": "n2", "title": "T", "message": "M", "kind": "critical", "created_at": "2024-01-10T08:00:00"},
                {"id": "n3", "title": "T", "message": "M", "kind": "error", "created_at": "2024-01-10T08:00:00"},
            ]
        ),
    )

    with caplog.at_level("WARNING"):
        notifications = NotificationRepository(kv_store).list_notifications()

    assert [n.id for n in notifications] == ["n3"]
    assert notifications[0].created_at.tzinfo is not None
    assert "Se descarta" in caplog.text


def test_alerts_missing_priority_default_to_zero(kv_store) -> None:
    kv_store.set(
        ALERTS_STORAGE_KEY,
        json.dumps(
            [{"id": "a1", "title": "T", "message": "M", "created_at": "2024-01-10T08:00:00", "dedup_key": "k"}]
        ),
    )

    alerts = NotificationRepository(kv_store).list_alerts()

    assert alerts[0].priority == 0
    assert alerts[0].kind == "info"


def test_tombstones_are_deduplicated_and_persisted(kv_store) -> None:
    registry = TombstoneRegistry(kv_store)

    assert registry.add("past-1") is True
    assert registry.add("past-1") is False
    assert registry.add_many(["past-1", "alert-2", "alert-2", ""]) == 1

    assert json.loads(kv_store.get(TOMBSTONES_STORAGE_KEY)) == ["past-1", "alert-2"]
    assert "alert-2" in TombstoneRegistry(kv_store)
    assert len(registry) == 2


def test_tombstone_registry_ignores_non_string_entries(kv_store) -> None:
    kv_store.set(TOMBSTONES_STORAGE_KEY, json.dumps(["a", 3, None, "a"]))

    assert TombstoneRegistry(kv_store).keys() == ["a"]


def test_notified_registry_round_trip(kv_store) -> None:
    registries = ProgrammingRegistryRepository(kv_store)

    registries.save_notified({"past": {10, 2, "x"}, "today-pending": [5]})

    assert json.loads(kv_store.get(NOTIFIED_IDS_STORAGE_KEY)) == {
        "past": [2, 10, "x"],
        "today-overdue": [],
        "today-pending": [5],
    }
    assert registries.load_notified() == {
        "past": {2, 10, "x"},
        "today-overdue": set(),
        "today-pending": {5},
    }


def test_legacy_flat_list_is_applied_to_every_bucket(kv_store) -> None:
    kv_store.set(NOTIFIED_IDS_STORAGE_KEY, json.dumps([1, "2", True]))

    loaded = ProgrammingRegistryRepository(kv_store).load_notified()

    assert loaded == {bucket: {1, "2"} for bucket in ("past", "today-overdue", "today-pending")}


def test_corrupt_registries_degrade_to_empty(kv_store, caplog) -> None:
    kv_store.set(NOTIFIED_IDS_STORAGE_KEY, "not json")
    kv_store.set(IMMINENT_SENT_STORAGE_KEY, json.dumps({"ids": [1]}))
    registries = ProgrammingRegistryRepository(kv_store)

    with caplog.at_level("ERROR"):
        assert registries.load_notified() == {
            "past": set(),
            "today-overdue": set(),
            "today-pending": set(),
        }
        assert registries.load_imminent_sent() == set()

    assert NOTIFIED_IDS_STORAGE_KEY in caplog.text


def test_clear_removes_both_registries(kv_store) -> None:
    registries = ProgrammingRegistryRepository(kv_store)
    registries.save_notified({"past": [1]})
    registries.save_imminent_sent([1])

    registries.clear()

    assert kv_store.get(NOTIFIED_IDS_STORAGE_KEY) is None
    assert kv_store.get(IMMINENT_SENT_STORAGE_KEY) is None
