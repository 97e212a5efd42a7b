"""Key-value row backing device-scoped storage: one JSON string per fixed key."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from selfintro.database import Base


class StorageEntry(Base):
    __tablename__ = "storage_entries"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)  # JSON-serialized payload

    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
