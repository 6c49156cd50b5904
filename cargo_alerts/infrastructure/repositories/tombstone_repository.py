"""Persisted registry of dedup keys dismissed by the user."""

from __future__ import annotations

import logging

from cargo_alerts.infrastructure.storage import KeyValueStore

from .base import read_json, write_json

logger = logging.getLogger(__name__)

TOMBSTONES_STORAGE_KEY = "deleted_notification_keys"


class TombstoneRegistry:
    """Set of dedup keys that must never be recreated.

    Tombstones are permanent: there is deliberately no operation to clear them.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._keys: list[str] = []
        self.reload()

    def reload(self) -> None:
        stored = read_json(self.store, TOMBSTONES_STORAGE_KEY, list, [])
        keys: list[str] = []
        for key in stored:
            if isinstance(key, str) and key not in keys:
                keys.append(key)
        self._keys = keys

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def keys(self) -> list[str]:
        return list(self._keys)

    def add(self, key: str) -> bool:
        """Register ``key``; return ``False`` when it was already present."""

        if key in self._keys:
            return False
        self._keys.append(key)
        write_json(self.store, TOMBSTONES_STORAGE_KEY, self._keys)
        logger.info("Registrando clave '%s' como eliminada", key)
        return True

    def add_many(self, keys: list[str]) -> int:
        added = [key for key in dict.fromkeys(keys) if key and key not in self._keys]
        if not added:
            return 0
        self._keys.extend(added)
        write_json(self.store, TOMBSTONES_STORAGE_KEY, self._keys)
        logger.info("Registradas %s claves como eliminadas", len(added))
        return len(added)


__all__ = ["TombstoneRegistry", "TOMBSTONES_STORAGE_KEY"]
