"""Key-value storage scopes used by the generation core.

Two scopes exist:

  DeviceStorage  — SQLAlchemy-backed, survives restarts (history, templates).
  SessionStorage — in-process dict owned by one tab session (ephemeral result).

Keys are fixed names with no per-user namespacing: two logical profiles
sharing one database will see each other's history and templates.
"""

import json
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.orm import Session, sessionmaker

from selfintro.database import SessionLocal, engine, init_db, make_engine
from selfintro.models.storage_entry import StorageEntry

# ── Storage keys ──────────────────────────────────────────────────────────────
PROMPT_TEMPLATES_KEY = "promptTemplates"
ACTIVE_PROMPT_ID_KEY = "activePromptId"
PROMPT_TEMPLATE_KEY = "promptTemplate"
USE_CUSTOM_PROMPT_KEY = "useCustomPrompt"
GENERATION_RECORDS_KEY = "generationRecords"
CURRENT_GENERATION_RESULT_KEY = "currentGenerationResult"


class KeyValueStorage:
    """String-valued storage; values are JSON documents."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, items: Mapping[str, str]) -> None:
        """Write every item as one logical write."""
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> list[str]:
        raise NotImplementedError

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get_json(self, key: str) -> Any:
        """Parsed value, or None when the key is missing.

        Raises json.JSONDecodeError on a corrupt value; callers decide the fallback.
        """
        raw = self.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value, ensure_ascii=False))


class SessionStorage(KeyValueStorage):
    """Tab-scoped storage. Lives as long as the object; other instances never see it."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_many(self, items: Mapping[str, str]) -> None:
        self._items.update(items)

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()


class DeviceStorage(KeyValueStorage):
    """Durable storage on top of the storage_entries table."""

    def __init__(self, session_factory: Optional[sessionmaker] = None) -> None:
        self._session_factory = session_factory or SessionLocal

    def _session(self) -> Session:
        return self._session_factory()

    def get(self, key: str) -> Optional[str]:
        db = self._session()
        try:
            entry = db.get(StorageEntry, key)
            return entry.value if entry is not None else None
        finally:
            db.close()

    def set_many(self, items: Mapping[str, str]) -> None:
        db = self._session()
        try:
            for key, value in items.items():
                entry = db.get(StorageEntry, key)
                if entry is None:
                    db.add(StorageEntry(key=key, value=value))
                else:
                    entry.value = value
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def remove(self, key: str) -> None:
        self.remove_many([key])

    def remove_many(self, keys: Iterable[str]) -> None:
        db = self._session()
        try:
            db.query(StorageEntry).filter(StorageEntry.key.in_(list(keys))).delete(
                synchronize_session=False
            )
            db.commit()
        finally:
            db.close()

    def keys(self) -> list[str]:
        db = self._session()
        try:
            return [row[0] for row in db.query(StorageEntry.key).order_by(StorageEntry.key).all()]
        finally:
            db.close()


def open_device_storage(url: Optional[str] = None) -> DeviceStorage:
    """DeviceStorage on url (default: settings.DATABASE_URL), creating tables if needed."""
    if url is None:
        init_db(engine)
        return DeviceStorage(SessionLocal)

    bind = make_engine(url)
    init_db(bind)
    return DeviceStorage(sessionmaker(autocommit=False, autoflush=False, bind=bind))
