"""Holds at most one generation result for one tab session.

Lifecycle: EMPTY -> STORED (store) -> EMPTY (clear). A consumer reads the
result, archives it in the history store, then clears it; read() has no
side effects so a page can inspect the cache before consuming it.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from selfintro.schemas.generation import GenerationResult
from selfintro.storage import CURRENT_GENERATION_RESULT_KEY, KeyValueStorage

logger = logging.getLogger(__name__)


class EphemeralResultCache:
    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    def store(self, result: GenerationResult) -> None:
        """Replace whatever is cached with result."""
        payload = result.model_dump_json(by_alias=True)
        self._storage.set(CURRENT_GENERATION_RESULT_KEY, payload)
        logger.debug(
            f"Stored generation result ({len(result.text)} chars, "
            f"{result.model_provider}/{result.model_id})"
        )

    def read(self) -> Optional[GenerationResult]:
        raw = self._storage.get(CURRENT_GENERATION_RESULT_KEY)
        if raw is None:
            return None
        try:
            return GenerationResult.model_validate_json(raw)
        except (ValidationError, json.JSONDecodeError) as e:
            logger.error(f"Failed to parse cached generation result: {e}")
            return None

    def has(self) -> bool:
        return self.read() is not None

    def clear(self) -> None:
        self._storage.remove(CURRENT_GENERATION_RESULT_KEY)
        logger.debug("Cleared cached generation result")
