"""Prompt template store — named, editable prompt templates with a protected default.

State persisted to device storage on every mutation, as one write:
  promptTemplates  {id: PromptTemplate}
  activePromptId   id of the template rendered on the next generation
  promptTemplate   body of the active template
  useCustomPrompt  whether generation uses the template at all
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from selfintro.prompts import DEFAULT_TEMPLATE_ID
from selfintro.schemas.form import GenerationSettings, PromptTemplate, default_prompt_template
from selfintro.storage import (
    ACTIVE_PROMPT_ID_KEY,
    PROMPT_TEMPLATE_KEY,
    PROMPT_TEMPLATES_KEY,
    USE_CUSTOM_PROMPT_KEY,
    KeyValueStorage,
)

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "description", "content", "system_prompt")


class PromptTemplateStore:
    def __init__(self, storage: KeyValueStorage):
        self._storage = storage
        self._templates: dict[str, PromptTemplate] = {}
        self._active_id = DEFAULT_TEMPLATE_ID
        self._use_custom_prompt = False
        self._load()

    # ── Loading / persistence ─────────────────────────────────────────────────

    def _load(self) -> None:
        templates: dict[str, PromptTemplate] = {}
        active_id = DEFAULT_TEMPLATE_ID
        use_custom = False
        try:
            raw = self._storage.get_json(PROMPT_TEMPLATES_KEY)
            if raw is not None:
                # Older blobs stored a list of templates
                items = raw.values() if isinstance(raw, dict) else raw
                for item in items:
                    try:
                        template = PromptTemplate.model_validate(item)
                    except ValidationError as e:
                        logger.warning(f"Skipping invalid stored prompt template: {e}")
                        continue
                    templates[template.id] = template
            active_id = self._storage.get_json(ACTIVE_PROMPT_ID_KEY) or DEFAULT_TEMPLATE_ID
            use_custom = bool(self._storage.get_json(USE_CUSTOM_PROMPT_KEY))
        except (json.JSONDecodeError, ValidationError, TypeError, SQLAlchemyError) as e:
            logger.error(f"Failed to load prompt templates, using defaults: {e}")
            templates, active_id, use_custom = {}, DEFAULT_TEMPLATE_ID, False

        if DEFAULT_TEMPLATE_ID not in templates:
            templates = {DEFAULT_TEMPLATE_ID: default_prompt_template(), **templates}
        if active_id not in templates:
            logger.warning(f"Active prompt id {active_id!r} not found, resetting to default")
            active_id = DEFAULT_TEMPLATE_ID

        self._templates = templates
        self._active_id = active_id
        self._use_custom_prompt = use_custom

    def _snapshot(self) -> dict[str, str]:
        templates = {
            tid: t.model_dump(by_alias=True, exclude_none=True) for tid, t in self._templates.items()
        }
        return {
            PROMPT_TEMPLATES_KEY: json.dumps(templates, ensure_ascii=False),
            ACTIVE_PROMPT_ID_KEY: json.dumps(self._active_id),
            PROMPT_TEMPLATE_KEY: json.dumps(self.prompt_template, ensure_ascii=False),
            USE_CUSTOM_PROMPT_KEY: json.dumps(self._use_custom_prompt),
        }

    def _persist(self) -> None:
        try:
            self._storage.set_many(self._snapshot())
        except SQLAlchemyError as e:
            logger.error(f"Failed to save prompt templates: {e}")

    def backup(self) -> bool:
        """Write the current state only if storage has no templates yet."""
        if PROMPT_TEMPLATES_KEY in self._storage:
            logger.info("Prompt templates already stored, backup skipped")
            return False
        self._persist()
        return True

    # ── Queries ───────────────────────────────────────────────────────────────

    def list(self) -> list[PromptTemplate]:
        return [t.model_copy() for t in self._templates.values()]

    def get(self, template_id: str) -> Optional[PromptTemplate]:
        template = self._templates.get(template_id)
        return template.model_copy() if template is not None else None

    @property
    def active_prompt_id(self) -> str:
        return self._active_id

    @property
    def active(self) -> PromptTemplate:
        return self._templates[self._active_id].model_copy()

    @property
    def prompt_template(self) -> str:
        return self._templates[self._active_id].content

    @property
    def use_custom_prompt(self) -> bool:
        return self._use_custom_prompt

    def apply_to(self, generation_settings: GenerationSettings) -> GenerationSettings:
        """Copy of generation_settings carrying this store's template state."""
        return generation_settings.model_copy(
            update={
                "use_custom_prompt": self._use_custom_prompt,
                "prompt_template": self.prompt_template,
                "active_prompt_id": self._active_id,
                "prompt_templates": {tid: t.model_copy() for tid, t in self._templates.items()},
            }
        )

    # ── Mutations ─────────────────────────────────────────────────────────────

    def add(
        self,
        name: str,
        content: str,
        description: str = "",
        system_prompt: Optional[str] = None,
    ) -> str:
        """Insert a new template and make it active."""
        template_id = str(uuid.uuid4())
        self._templates[template_id] = PromptTemplate(
            id=template_id,
            name=name,
            description=description,
            content=content,
            system_prompt=system_prompt,
        )
        self._active_id = template_id
        self._persist()
        return template_id

    def update(self, template_id: str, **changes) -> None:
        template = self._templates.get(template_id)
        if template is None:
            logger.warning(f"Cannot update unknown prompt template {template_id!r}")
            return
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            logger.warning(f"Cannot update prompt template fields: {sorted(unknown)}")
            return
        try:
            updated = PromptTemplate.model_validate({**template.model_dump(), **changes})
        except ValidationError as e:
            logger.warning(f"Rejected invalid update to prompt template {template_id!r}: {e}")
            return
        self._templates[template_id] = updated
        self._persist()

    def delete(self, template_id: str) -> None:
        if template_id == DEFAULT_TEMPLATE_ID:
            logger.warning("The default prompt template cannot be deleted")
            return
        if template_id not in self._templates:
            logger.warning(f"Cannot delete unknown prompt template {template_id!r}")
            return
        del self._templates[template_id]
        if self._active_id == template_id:
            self._active_id = DEFAULT_TEMPLATE_ID
        self._persist()

    def set_active(self, template_id: str) -> None:
        if template_id not in self._templates:
            logger.warning(f"Cannot activate unknown prompt template {template_id!r}")
            return
        self._active_id = template_id
        self._persist()

    def set_use_custom_prompt(self, enabled: bool) -> None:
        self._use_custom_prompt = bool(enabled)
        self._persist()
