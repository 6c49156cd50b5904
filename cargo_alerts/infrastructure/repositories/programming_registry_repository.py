"""Idempotence registries used by the programming alert scheduler."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from cargo_alerts.domain.entities import NOTIFIED_BUCKETS
from cargo_alerts.infrastructure.storage import KeyValueStore

from .base import read_json, write_json

logger = logging.getLogger(__name__)

NOTIFIED_IDS_STORAGE_KEY = "programming_notified_ids"
IMMINENT_SENT_STORAGE_KEY = "imminent_alerts"

ItemId = int | str


class ProgrammingRegistryRepository:
    """Load and persist the per-bucket notified ids and imminent-sent ids."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def load_notified(self) -> dict[str, set[ItemId]]:
        stored = read_json(self.store, NOTIFIED_IDS_STORAGE_KEY, (dict, list), {})
        if isinstance(stored, list):
            # Older clients kept one flat list shared by every bucket.
            ids = _valid_ids(stored)
            return {bucket: set(ids) for bucket in NOTIFIED_BUCKETS}
        registry: dict[str, set[ItemId]] = {}
        for bucket in NOTIFIED_BUCKETS:
            values = stored.get(bucket, [])
            if not isinstance(values, list):
                logger.warning("Registro de notificados inválido para '%s'", bucket)
                values = []
            registry[bucket] = set(_valid_ids(values))
        return registry

    def save_notified(self, registry: Mapping[str, Iterable[ItemId]]) -> None:
        write_json(
            self.store,
            NOTIFIED_IDS_STORAGE_KEY,
            {bucket: _sorted_ids(registry.get(bucket, ())) for bucket in NOTIFIED_BUCKETS},
        )

    def load_imminent_sent(self) -> set[ItemId]:
        return set(_valid_ids(read_json(self.store, IMMINENT_SENT_STORAGE_KEY, list, [])))

    def save_imminent_sent(self, ids: Iterable[ItemId]) -> None:
        write_json(self.store, IMMINENT_SENT_STORAGE_KEY, _sorted_ids(ids))

    def clear(self) -> None:
        self.store.remove(NOTIFIED_IDS_STORAGE_KEY)
        self.store.remove(IMMINENT_SENT_STORAGE_KEY)


def _valid_ids(values: Iterable[object]) -> list[ItemId]:
    return [
        value
        for value in values
        if isinstance(value, (int, str)) and not isinstance(value, bool)
    ]


def _sorted_ids(ids: Iterable[ItemId]) -> list[ItemId]:
    return sorted(
        set(ids),
        key=lambda value: (1, 0, value) if isinstance(value, str) else (0, value, ""),
    )


__all__ = [
    "ProgrammingRegistryRepository",
    "NOTIFIED_IDS_STORAGE_KEY",
    "IMMINENT_SENT_STORAGE_KEY",
]
