"""Tests for the realtime notification publisher."""

from __future__ import annotations

import asyncio

import anyio
import anyio.to_thread

from cargo_alerts.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
)


class RecordingWebSocket:
    def __init__(self, *, fail: bool = False) -> None:
        self.accepted = False
        self.sent: list[dict] = []
        self.fail = fail

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_dispatch_without_connections_is_a_no_op() -> None:
    manager = NotificationConnectionManager()

    NotificationPublisher(manager).dispatch("notification.created", {"id": "n1"})

    assert manager.connection_count == 0


def test_dispatch_broadcasts_on_running_loop() -> None:
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)
    websocket = RecordingWebSocket()
    broken = RecordingWebSocket(fail=True)
    payload = {"id": "n1"}

    async def scenario() -> None:
        await manager.connect(websocket)
        await manager.connect(broken)
        publisher.dispatch("notification.created", payload)
        payload["id"] = "mutated"
        await asyncio.sleep(0)
        await asyncio.sleep(0)

    asyncio.run(scenario())

    assert websocket.accepted
    assert websocket.sent == [{"type": "notification.created", "data": {"id": "n1"}}]
    assert manager.connection_count == 1


def test_dispatch_outside_event_loop_is_skipped(caplog) -> None:
    manager = NotificationConnectionManager()
    asyncio.run(manager.connect(RecordingWebSocket()))

    with caplog.at_level("DEBUG"):
        NotificationPublisher(manager).dispatch("alert.created", {"id": "a1"})

    assert "alert.created" in caplog.text
    assert "Sin bucle de eventos activo" in caplog.text


def test_dispatch_from_worker_thread_is_delivered() -> None:
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)
    websocket = RecordingWebSocket()

    async def scenario() -> None:
        await manager.connect(websocket)
        await anyio.to_thread.run_sync(publisher.dispatch, "notification.updated", {"ids": ["n1"]})
        await asyncio.sleep(0)

    anyio.run(scenario)

    assert websocket.sent == [{"type": "notification.updated", "data": {"ids": ["n1"]}}]
