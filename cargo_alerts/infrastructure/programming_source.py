"""Sources providing the programming records checked by the scheduler."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol

import httpx

from cargo_alerts.config import Settings
from cargo_alerts.domain.entities import ScheduledItem

logger = logging.getLogger(__name__)

LoadedCallback = Callable[[], Any]


class ScheduledItemSource(Protocol):
    """Read-only view over the externally owned programming collection."""

    @property
    def loading(self) -> bool:
        ...

    def list_items(self) -> list[ScheduledItem]:
        ...


class StaticScheduledItemSource:
    """In-memory source fed by the host application."""

    def __init__(self, items: Iterable[ScheduledItem] = (), *, loading: bool = False) -> None:
        self._items = list(items)
        self._loading = loading
        self._callbacks: list[LoadedCallback] = []

    @property
    def loading(self) -> bool:
        return self._loading

    def list_items(self) -> list[ScheduledItem]:
        return list(self._items)

    def subscribe(self, callback: LoadedCallback) -> None:
        self._callbacks.append(callback)

    def replace(self, items: Iterable[ScheduledItem]) -> None:
        """Swap the collection and notify subscribers that loading finished."""

        self._items = list(items)
        self._loading = False
        for callback in list(self._callbacks):
            callback()


class HttpScheduledItemSource:
    """Fetch programming records from the operations backend."""

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._token = token
        self._timeout = timeout
        self._transport = transport
        self._items: list[ScheduledItem] = []
        self._loading = False
        self._callbacks: list[LoadedCallback] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpScheduledItemSource":
        if not settings.programming_api_url:
            msg = "PROGRAMMING_API_URL is not configured"
            raise RuntimeError(msg)
        return cls(
            settings.programming_api_url,
            token=settings.programming_api_token,
            timeout=settings.programming_request_timeout,
        )

    @property
    def loading(self) -> bool:
        return self._loading

    def list_items(self) -> list[ScheduledItem]:
        return list(self._items)

    def subscribe(self, callback: LoadedCallback) -> None:
        self._callbacks.append(callback)

    async def refresh(self) -> bool:
        """Reload the collection; on failure the previous list is kept."""

        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        self._loading = True
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(self.url, headers=headers)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "El servicio de programación respondió con estado %s: %s",
                exc.response.status_code,
                exc.response.text,
            )
            return False
        except (httpx.RequestError, ValueError) as exc:
            logger.error("No se pudo consultar la programación: %s", exc)
            return False
        finally:
            self._loading = False

        self._items = parse_programming_payload(payload)
        logger.info("Programación cargada: %s registros", len(self._items))
        for callback in list(self._callbacks):
            callback()
        return True


def parse_programming_payload(payload: Any) -> list[ScheduledItem]:
    """Convert the backend response into :class:`ScheduledItem` objects."""

    records = payload.get("data", []) if isinstance(payload, Mapping) else payload
    if not isinstance(records, list):
        logger.warning("Respuesta de programación con formato inesperado")
        return []
    items: list[ScheduledItem] = []
    for record in records:
        if isinstance(record, Mapping):
            items.append(ScheduledItem.from_payload(record))
        else:
            logger.warning("Se descarta un registro de programación inválido")
    return items


__all__ = [
    "ScheduledItemSource",
    "StaticScheduledItemSource",
    "HttpScheduledItemSource",
    "parse_programming_payload",
]
