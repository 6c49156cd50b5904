"""Shared helpers for repositories persisted through a key-value store."""

from __future__ import annotations

import json
import logging
from typing import Any

from cargo_alerts.infrastructure.storage import KeyValueStore

logger = logging.getLogger(__name__)


def read_json(store: KeyValueStore, key: str, expected: type | tuple[type, ...], default: Any) -> Any:
    """Return the decoded value stored at ``key`` or ``default``.

    Missing keys, undecodable JSON and values of an unexpected type all
    degrade to ``default``; only the last two are logged.
    """

    raw = store.get(key)
    if raw is None:
        return default
    try:
        value = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        logger.error("Estado corrupto en '%s', se usará el valor por defecto: %s", key, exc)
        return default
    if not isinstance(value, expected):
        logger.error(
            "Estado inesperado en '%s' (%s), se usará el valor por defecto",
            key,
            type(value).__name__,
        )
        return default
    return value


def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    """Serialize ``value`` and write it under ``key``."""

    store.set(key, json.dumps(value, ensure_ascii=False))


__all__ = ["read_json", "write_json"]
