"""Utility helpers to push notification events to websocket subscribers."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from anyio import from_thread

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Schedule delivery of store events without blocking the caller."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, event_type: str, payload: Any) -> None:
        """Schedule ``event_type`` to be broadcast to every subscriber."""

        if not self._manager.connection_count:
            return

        message = {"type": event_type, "data": copy.deepcopy(payload)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                if hasattr(from_thread, "start_soon"):
                    from_thread.start_soon(self._manager.broadcast, message)
                else:
                    from_thread.run(self._manager.broadcast, message)
            except RuntimeError:
                # anyio raises NoEventLoopError, a RuntimeError, outside worker threads.
                logger.debug("Sin bucle de eventos activo; se omite el evento %s", event_type)
        else:
            loop.create_task(self._manager.broadcast(message))


notification_publisher = NotificationPublisher(notification_manager)


__all__ = ["NotificationPublisher", "notification_publisher"]
