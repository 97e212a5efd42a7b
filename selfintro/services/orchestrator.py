"""
Generation orchestrator — the result page's entry logic.

On enter(), in priority order:
  1. record_id given      → replay that history record (no network call, no new record)
  2. cached result exists → read it, archive it in history, clear the cache
  3. otherwise            → call the model service once; on success store the
                            result in the cache, archive it, clear the cache

Each orchestrator instance runs enter() at most once. A second call, e.g.
from a framework mounting the page twice, returns a "skipped" outcome
without touching any store. regenerate() is the only way to re-run step 3.
"""

import logging
import time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from selfintro.config import settings
from selfintro.schemas.form import FormData
from selfintro.schemas.generation import (
    GenerationRecord,
    GenerationRecordDraft,
    GenerationResult,
    ProjectId,
)
from selfintro.services.form_session import FormSession
from selfintro.services.history import GenerationHistoryStore
from selfintro.services.model_catalog import estimate_cost, estimate_tokens
from selfintro.services.model_service import ModelService, default_model_id
from selfintro.services.prompt_templates import PromptTemplateStore
from selfintro.services.providers import ModelProvider
from selfintro.services.result_cache import EphemeralResultCache

logger = logging.getLogger(__name__)

NO_RESULT_MESSAGE = "No result found, please regenerate."
GENERATION_FAILED_PREFIX = "Generation failed: "
DEFAULT_PROJECT_TITLE = "自我介紹"


class MountState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    DONE = "done"


class OutcomeStatus(str, Enum):
    REPLAYED = "replayed"    # loaded from history by id
    RESTORED = "restored"    # archived from the ephemeral cache
    GENERATED = "generated"  # fresh provider call
    FAILED = "failed"
    SKIPPED = "skipped"      # enter() already ran, or a generation is in flight


class ModelSelection(BaseModel):
    """Which provider/model the page generates with. provider may be any raw string."""

    model_config = ConfigDict(protected_namespaces=())

    provider: str = Field(default_factory=lambda: settings.DEFAULT_PROVIDER)
    api_key: Optional[str] = None
    model_id: Optional[str] = None
    max_tokens: Optional[int] = None

    def resolved_model_id(self) -> str:
        if self.model_id:
            return self.model_id
        parsed = ModelProvider.parse(self.provider)
        return default_model_id(parsed) if parsed is not None else ""


class GenerationOutcome(BaseModel):
    status: OutcomeStatus
    record: Optional[GenerationRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (OutcomeStatus.REPLAYED, OutcomeStatus.RESTORED, OutcomeStatus.GENERATED)


def _now_ms() -> int:
    return int(time.time() * 1000)


class GenerationOrchestrator:
    def __init__(
        self,
        form_session: Optional[FormSession],
        template_store: PromptTemplateStore,
        model_service: ModelService,
        result_cache: EphemeralResultCache,
        history: GenerationHistoryStore,
        selection: ModelSelection,
    ):
        self._form_session = form_session
        self._templates = template_store
        self._model_service = model_service
        self._cache = result_cache
        self._history = history
        self._selection = selection

        self._state = MountState.NOT_STARTED
        self._left = False
        self._project_id: ProjectId = ""
        self._project_title = ""

    @property
    def state(self) -> MountState:
        return self._state

    # ── Entry points ──────────────────────────────────────────────────────────

    async def enter(
        self,
        record_id: Optional[str] = None,
        project_id: Optional[ProjectId] = None,
        project_title: str = "",
    ) -> GenerationOutcome:
        if self._state is not MountState.NOT_STARTED:
            logger.info(f"Orchestrator already initialized ({self._state.value}), skipping enter")
            return GenerationOutcome(status=OutcomeStatus.SKIPPED)

        self._state = MountState.RUNNING
        self._project_id = project_id if project_id is not None else ""
        self._project_title = project_title
        try:
            if record_id:
                return self._replay(record_id)
            restored = self._restore_cached()
            if restored is not None:
                return restored
            return await self._generate()
        finally:
            self._state = MountState.DONE

    async def regenerate(self) -> GenerationOutcome:
        """User-initiated fresh generation with the current form state."""
        if self._state is MountState.RUNNING:
            logger.info("Generation already in progress, ignoring regenerate")
            return GenerationOutcome(status=OutcomeStatus.SKIPPED)

        self._state = MountState.RUNNING
        self._left = False
        try:
            return await self._generate()
        finally:
            self._state = MountState.DONE

    def leave(self) -> None:
        """The page navigated away.

        A provider call still in flight is archived when it returns, since it
        was billed; it is just no longer shown.
        """
        self._left = True

    # ── Steps ─────────────────────────────────────────────────────────────────

    def _replay(self, record_id: str) -> GenerationOutcome:
        record = self._history.get_by_id(record_id)
        if record is None:
            logger.warning(f"History record {record_id!r} not found")
            return GenerationOutcome(status=OutcomeStatus.FAILED, error=NO_RESULT_MESSAGE)

        if self._form_session is not None:
            self._form_session.load(record.form_data)
        logger.info(f"Replaying history record {record_id}")
        return GenerationOutcome(status=OutcomeStatus.REPLAYED, record=record)

    def _restore_cached(self) -> Optional[GenerationOutcome]:
        if not self._cache.has():
            return None
        result = self._cache.read()
        if result is None:
            return None

        # read → append → clear, with nothing in between
        record_id = self._history.append(self._draft_from(result))
        self._cache.clear()

        logger.info(f"Archived cached generation result as {record_id}")
        return GenerationOutcome(status=OutcomeStatus.RESTORED, record=self._history.get_by_id(record_id))

    async def _generate(self) -> GenerationOutcome:
        form_data = self._request_form_data()
        if form_data is None:
            return GenerationOutcome(status=OutcomeStatus.FAILED, error=NO_RESULT_MESSAGE)

        selection = self._selection
        response = await self._model_service.generate(
            form_data,
            selection.provider,
            selection.api_key,
            selection.model_id,
            selection.max_tokens,
        )
        if not response.ok:
            return GenerationOutcome(
                status=OutcomeStatus.FAILED,
                error=f"{GENERATION_FAILED_PREFIX}{response.error}",
            )

        # No await from here on: store → append → clear happen in one continuation
        model_id = selection.resolved_model_id()
        tokens = estimate_tokens(response.content)
        result = GenerationResult(
            text=response.content,
            prompt=response.prompt,
            project_title=self._label(form_data),
            project_id=self._project_id,
            model_provider=selection.provider,
            model_id=model_id,
            estimated_tokens=tokens,
            estimated_cost=estimate_cost(tokens, selection.provider, model_id),
            timestamp=_now_ms(),
            form_data=form_data,
            prompt_template=form_data.generation_settings.prompt_template,
        )
        self._cache.store(result)
        record_id = self._history.append(self._draft_from(result))
        self._cache.clear()

        if self._left:
            logger.warning(f"Generation finished after the page was left; archived as {record_id}")
        return GenerationOutcome(status=OutcomeStatus.GENERATED, record=self._history.get_by_id(record_id))

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _request_form_data(self) -> Optional[FormData]:
        if self._form_session is None:
            return None
        form_data = self._form_session.snapshot()
        form_data.generation_settings = self._templates.apply_to(form_data.generation_settings)
        return form_data

    def _label(self, form_data: FormData) -> str:
        return self._project_title or form_data.personal_info.name or DEFAULT_PROJECT_TITLE

    def _draft_from(self, result: GenerationResult) -> GenerationRecordDraft:
        form_data = result.form_data
        if form_data is None:
            form_data = self._request_form_data() or FormData()
        return GenerationRecordDraft(
            project_id=result.project_id if result.project_id is not None else "",
            project_title=result.project_title,
            form_data=form_data,
            generated_text=result.text,
            model_provider=result.model_provider,
            model_id=result.model_id,
            estimated_tokens=result.estimated_tokens,
            estimated_cost=result.estimated_cost,
            prompt_template=result.prompt_template or form_data.generation_settings.prompt_template,
            actual_prompt=result.prompt,
        )
