"""SQLAlchemy ORM models."""

from selfintro.models.storage_entry import StorageEntry

__all__ = [
    "StorageEntry",
]
