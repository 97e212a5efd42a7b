"""Generation core services."""

from selfintro.services.form_session import FormSession
from selfintro.services.history import GenerationHistoryStore
from selfintro.services.model_service import ModelService
from selfintro.services.orchestrator import (
    GenerationOrchestrator,
    GenerationOutcome,
    ModelSelection,
    MountState,
    OutcomeStatus,
)
from selfintro.services.prompt_templates import PromptTemplateStore
from selfintro.services.providers import GeminiAdapter, ModelProvider, OpenAIAdapter
from selfintro.services.result_cache import EphemeralResultCache

__all__ = [
    "FormSession",
    "GenerationHistoryStore",
    "ModelService",
    "GenerationOrchestrator",
    "GenerationOutcome",
    "ModelSelection",
    "MountState",
    "OutcomeStatus",
    "PromptTemplateStore",
    "GeminiAdapter",
    "ModelProvider",
    "OpenAIAdapter",
    "EphemeralResultCache",
]
