"""Durable string key-value storage backends.

Every persisted collection of the notification engine is serialized to a
string and written through one of these stores. Backends never raise on
read or write: failures are logged and reads degrade to ``None``.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from cargo_alerts.config import (
    STORAGE_BACKEND_DATABASE,
    STORAGE_BACKEND_MEMORY,
    Settings,
)
from cargo_alerts.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from cargo_alerts.infrastructure.models import KeyValueEntryModel

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string storage shared by every engine component."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local store, used for tests and ephemeral deployments."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileKeyValueStore:
    """Store every key inside a single JSON document on disk.

    The document is rewritten atomically on each change (temporary file plus
    ``os.replace``), so a crash never leaves a half-written file behind.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._values = self._load()

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._flush()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error(
                "No se pudo leer el almacenamiento %s, se usará vacío: %s", self.path, exc
            )
            return {}
        if not isinstance(document, dict):
            logger.error("El almacenamiento %s no contiene un objeto JSON", self.path)
            return {}

        values: dict[str, str] = {}
        for key, value in document.items():
            if isinstance(value, str):
                values[str(key)] = value
            else:
                logger.warning("Se descarta la clave '%s' con valor no textual", key)
        return values

    def _flush(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(self._values, handle, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError:
            logger.exception("No se pudo escribir el almacenamiento %s", self.path)


class SqlAlchemyKeyValueStore:
    """Store entries in the ``key_value_entry`` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        try:
            with self._session_factory() as session:
                model = session.get(KeyValueEntryModel, key)
                return model.value if model is not None else None
        except SQLAlchemyError as exc:
            logger.error("No se pudo leer la clave '%s' de la base de datos: %s", key, exc)
            return None

    def set(self, key: str, value: str) -> None:
        try:
            with self._session_factory() as session:
                model = session.get(KeyValueEntryModel, key)
                if model is None:
                    model = KeyValueEntryModel(key=key, value=value)
                    session.add(model)
                else:
                    model.value = value
                session.commit()
        except SQLAlchemyError:
            logger.exception("No se pudo guardar la clave '%s' en la base de datos", key)

    def remove(self, key: str) -> None:
        try:
            with self._session_factory() as session:
                model = session.get(KeyValueEntryModel, key)
                if model is not None:
                    session.delete(model)
                    session.commit()
        except SQLAlchemyError:
            logger.exception("No se pudo eliminar la clave '%s' de la base de datos", key)


def build_key_value_store(settings: Settings) -> KeyValueStore:
    """Return the backend selected by ``STORAGE_BACKEND``."""

    if settings.storage_backend == STORAGE_BACKEND_MEMORY:
        return InMemoryKeyValueStore()
    if settings.storage_backend == STORAGE_BACKEND_DATABASE:
        engine = create_database_engine(settings.database_url)
        initialize_database(engine)
        return SqlAlchemyKeyValueStore(create_session_factory(engine))
    return JsonFileKeyValueStore(settings.storage_path)


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "SqlAlchemyKeyValueStore",
    "build_key_value_store",
]
