"""Tests for the durable key-value storage backends."""

from __future__ import annotations

import json

import pytest
from sqlalchemy.exc import SQLAlchemyError

from cargo_alerts.config import Settings
from cargo_alerts.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from cargo_alerts.infrastructure.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    SqlAlchemyKeyValueStore,
    build_key_value_store,
)


@pytest.fixture()
def sqlite_store() -> SqlAlchemyKeyValueStore:
    engine = create_database_engine("sqlite:///:memory:")
    initialize_database(engine)
    yield SqlAlchemyKeyValueStore(create_session_factory(engine))
    engine.dispose()


@pytest.fixture(params=["memory", "file", "database"])
def any_store(request, tmp_path, sqlite_store):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    if request.param == "file":
        return JsonFileKeyValueStore(tmp_path / "state.json")
    return sqlite_store


def test_get_set_remove(any_store) -> None:
    assert any_store.get("missing") is None

    any_store.set("app_alerts", "[]")
    any_store.set("app_alerts", '[{"id": "a"}]')
    assert any_store.get("app_alerts") == '[{"id": "a"}]'

    any_store.remove("app_alerts")
    any_store.remove("app_alerts")
    assert any_store.get("app_alerts") is None


def test_file_store_survives_restart(tmp_path) -> None:
    path = tmp_path / "nested" / "state.json"
    JsonFileKeyValueStore(path).set("deleted_notification_keys", '["past-1"]')

    assert JsonFileKeyValueStore(path).get("deleted_notification_keys") == '["past-1"]'
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "deleted_notification_keys": '["past-1"]'
    }
    assert [p.name for p in path.parent.iterdir()] == ["state.json"]


@pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]"])
def test_corrupt_file_is_treated_as_empty(tmp_path, caplog, content) -> None:
    path = tmp_path / "state.json"
    path.write_text(content, encoding="utf-8")

    with caplog.at_level("ERROR"):
        store = JsonFileKeyValueStore(path)

    assert store.get("app_notifications") is None
    assert str(path) in caplog.text
    store.set("app_notifications", "[]")
    assert json.loads(path.read_text(encoding="utf-8")) == {"app_notifications": "[]"}


def test_file_write_failure_is_logged(tmp_path, monkeypatch, caplog) -> None:
    store = JsonFileKeyValueStore(tmp_path / "state.json")

    def failing_replace(*_args, **_kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("cargo_alerts.infrastructure.storage.os.replace", failing_replace)
    with caplog.at_level("ERROR"):
        store.set("app_alerts", "[]")

    assert store.get("app_alerts") == "[]"
    assert "No se pudo escribir" in caplog.text
    assert list(tmp_path.iterdir()) == []


def test_database_errors_are_logged(caplog) -> None:
    def broken_factory():
        raise SQLAlchemyError("connection refused")

    store = SqlAlchemyKeyValueStore(broken_factory)

    with caplog.at_level("ERROR"):
        assert store.get("app_alerts") is None
        store.set("app_alerts", "[]")
        store.remove("app_alerts")

    assert "connection refused" in caplog.text


@pytest.mark.parametrize(
    ("backend", "expected"),
    [
        ("memory", InMemoryKeyValueStore),
        ("file", JsonFileKeyValueStore),
        ("database", SqlAlchemyKeyValueStore),
    ],
)
def test_build_key_value_store_selects_backend(tmp_path, backend, expected) -> None:
    settings = Settings(
        storage_backend=backend,
        storage_path=str(tmp_path / "state.json"),
        database_url="sqlite:///:memory:",
    )

    assert isinstance(build_key_value_store(settings), expected)


def test_unknown_backend_is_rejected() -> None:
    with pytest.raises(ValueError):
        Settings(storage_backend="redis")
