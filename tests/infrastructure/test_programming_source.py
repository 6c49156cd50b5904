"""Tests for the programming record sources."""

from __future__ import annotations

import asyncio
from datetime import date

import httpx
import pytest

from cargo_alerts.config import Settings
from cargo_alerts.domain.entities import ScheduledItem
from cargo_alerts.infrastructure.programming_source import (
    HttpScheduledItemSource,
    StaticScheduledItemSource,
    parse_programming_payload,
)

API_URL = "https://operaciones.example.com/api/programming"

RECORD = {
    "id": 42,
    "dateStart": "2024-01-10T00:00:00.000Z",
    "timeStart": "09:00",
    "status": "UNASSIGNED",
    "service": "Izaje",
    "service_request": "SR-100",
    "ubication": "Puerto",
    "client": "Cliente SA",
}


def _source(handler, **kwargs) -> HttpScheduledItemSource:
    return HttpScheduledItemSource(API_URL, transport=httpx.MockTransport(handler), **kwargs)


def test_from_payload_accepts_backend_names() -> None:
    item = ScheduledItem.from_payload(RECORD)

    assert item.id == 42
    assert item.scheduled_date == "2024-01-10T00:00:00.000Z"
    assert item.scheduled_time == "09:00"
    assert item.reference == "SR-100"
    assert item.location == "Puerto"
    assert item.is_unassigned
    assert item.display_time == "09:00"


def test_display_time_defaults_to_midnight() -> None:
    assert ScheduledItem(id=1, scheduled_date=date(2024, 1, 10)).display_time == "00:00"


@pytest.mark.parametrize("payload", [[RECORD], {"data": [RECORD]}])
def test_parse_programming_payload_shapes(payload) -> None:
    assert [item.id for item in parse_programming_payload(payload)] == [42]


def test_parse_programming_payload_skips_invalid_records(caplog) -> None:
    with caplog.at_level("WARNING"):
        items = parse_programming_payload([RECORD, "basura"])

    assert len(items) == 1
    assert parse_programming_payload({"data": "nope"}) == []


def test_static_source_notifies_subscribers() -> None:
    calls: list[int] = []
    source = StaticScheduledItemSource(loading=True)
    source.subscribe(lambda: calls.append(len(source.list_items())))

    source.replace([ScheduledItem(id=1, scheduled_date="2024-01-10")])

    assert not source.loading
    assert calls == [1]


def test_http_source_refresh_loads_items_and_sends_token() -> None:
    seen_headers: list[httpx.Headers] = []
    loaded: list[bool] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_headers.append(request.headers)
        return httpx.Response(200, json={"data": [RECORD]})

    source = _source(handler, token="secreto")
    source.subscribe(lambda: loaded.append(source.loading))

    assert asyncio.run(source.refresh()) is True
    assert [item.id for item in source.list_items()] == [42]
    assert seen_headers[0]["Authorization"] == "Bearer secreto"
    assert loaded == [False]


def test_http_source_keeps_previous_items_on_error(caplog) -> None:
    responses = iter(
        [
            httpx.Response(200, json=[RECORD]),
            httpx.Response(500, text="fallo interno"),
        ]
    )
    source = _source(lambda request: next(responses))

    assert asyncio.run(source.refresh()) is True
    with caplog.at_level("ERROR"):
        assert asyncio.run(source.refresh()) is False

    assert [item.id for item in source.list_items()] == [42]
    assert not source.loading
    assert "500" in caplog.text


def test_http_source_handles_connection_errors(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("sin conexión", request=request)

    source = _source(handler)

    with caplog.at_level("ERROR"):
        assert asyncio.run(source.refresh()) is False

    assert source.list_items() == []
    assert "No se pudo consultar la programación" in caplog.text


def test_http_source_handles_invalid_json() -> None:
    source = _source(lambda request: httpx.Response(200, text="<html>"))

    assert asyncio.run(source.refresh()) is False


def test_from_settings_requires_url() -> None:
    with pytest.raises(RuntimeError):
        HttpScheduledItemSource.from_settings(Settings(programming_api_url=None))

    source = HttpScheduledItemSource.from_settings(
        Settings(programming_api_url=API_URL, programming_request_timeout=3)
    )
    assert source.url == API_URL
