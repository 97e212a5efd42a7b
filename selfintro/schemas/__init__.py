"""Pydantic schemas for form data and generation results."""

from selfintro.schemas.form import (
    Education,
    FormData,
    GenerationSettings,
    IndustrySettings,
    PersonalInfo,
    PromptTemplate,
    Skill,
    WorkExperience,
    default_form_data,
    default_prompt_template,
)
from selfintro.schemas.generation import (
    GenerateResponse,
    GenerationRecord,
    GenerationRecordDraft,
    GenerationResult,
    ProviderReply,
)

__all__ = [
    "Education",
    "FormData",
    "GenerationSettings",
    "IndustrySettings",
    "PersonalInfo",
    "PromptTemplate",
    "Skill",
    "WorkExperience",
    "default_form_data",
    "default_prompt_template",
    "GenerateResponse",
    "GenerationRecord",
    "GenerationRecordDraft",
    "GenerationResult",
    "ProviderReply",
]
