"""Append-only log of completed generations.

Records are immutable: the store supports append and delete-by-id only.
The whole collection is written back to device storage on every change.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from selfintro.schemas.generation import GenerationRecord, GenerationRecordDraft
from selfintro.storage import GENERATION_RECORDS_KEY, KeyValueStorage

logger = logging.getLogger(__name__)

SORT_FIELDS = ("timestamp", "project_title", "estimated_cost", "estimated_tokens")


def _now_ms() -> int:
    return int(time.time() * 1000)


class GenerationHistoryStore:
    def __init__(self, storage: KeyValueStorage):
        self._storage = storage
        self._records: list[GenerationRecord] = self._load()

    def _load(self) -> list[GenerationRecord]:
        try:
            raw = self._storage.get_json(GENERATION_RECORDS_KEY)
            if raw is None:
                return []
            return [GenerationRecord.model_validate(item) for item in raw]
        except (json.JSONDecodeError, ValidationError, TypeError, SQLAlchemyError) as e:
            logger.error(f"Error parsing stored generation records: {e}")
            return []

    def _persist(self) -> None:
        payload = [r.model_dump(mode="json", by_alias=True) for r in self._records]
        try:
            self._storage.set_json(GENERATION_RECORDS_KEY, payload)
        except SQLAlchemyError as e:
            # The in-memory log stays authoritative until the next successful write
            logger.error(f"Error saving generation records: {e}")

    def append(self, draft: GenerationRecordDraft) -> str:
        record = GenerationRecord(
            **draft.model_dump(exclude={"id", "timestamp"}),
            id=str(uuid.uuid4()),
            timestamp=_now_ms(),
        )
        self._records = [*self._records, record]
        self._persist()
        logger.info(f"Archived generation record {record.id} ({record.model_provider}/{record.model_id})")
        return record.id

    def list(self) -> list[GenerationRecord]:
        """All records in insertion order."""
        return [r.model_copy(deep=True) for r in self._records]

    def get_by_id(self, record_id: str) -> Optional[GenerationRecord]:
        for record in self._records:
            if record.id == record_id:
                return record.model_copy(deep=True)
        return None

    def delete_by_id(self, record_id: str) -> None:
        remaining = [r for r in self._records if r.id != record_id]
        if len(remaining) == len(self._records):
            return
        self._records = remaining
        self._persist()

    def sorted_by(self, field: str = "timestamp", descending: bool = True) -> list[GenerationRecord]:
        """Records ordered by field for display; stored order is unchanged."""
        if field not in SORT_FIELDS:
            raise ValueError(f"Cannot sort generation records by {field!r}")
        return sorted(self.list(), key=lambda r: getattr(r, field), reverse=descending)

    def __len__(self) -> int:
        return len(self._records)
