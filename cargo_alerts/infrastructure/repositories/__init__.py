"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository, serialize_entity
from .programming_registry_repository import ProgrammingRegistryRepository
from .tombstone_repository import TombstoneRegistry

__all__ = [
    "NotificationRepository",
    "ProgrammingRegistryRepository",
    "TombstoneRegistry",
    "serialize_entity",
]
