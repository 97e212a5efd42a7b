"""Form data schemas — the user's profile, target position and generation settings.

Stored JSON uses camelCase keys (personalInfo, workExperience, ...); Python
code uses snake_case attribute names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from selfintro.prompts import (
    DEFAULT_PROMPT_TEMPLATE,
    DEFAULT_TEMPLATE_DESCRIPTION,
    DEFAULT_TEMPLATE_ID,
    DEFAULT_TEMPLATE_NAME,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class Education(CamelModel):
    school: str = ""
    degree: str = ""  # high_school | associate | bachelor | master | phd | other
    major: str = ""
    graduation_year: str = ""


class WorkExperience(CamelModel):
    company: str = ""
    position: str = ""
    start_date: str = ""  # YYYY-MM
    end_date: str = ""
    is_current: bool = False
    description: str = ""


class Skill(CamelModel):
    name: str = ""
    level: str = ""  # beginner | intermediate | advanced | expert


class PersonalInfo(CamelModel):
    name: str = ""
    age: str = ""
    education: list[Education] = Field(default_factory=list)
    work_experience: list[WorkExperience] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    projects: str = ""
    awards: str = ""
    interests: str = ""


class IndustrySettings(CamelModel):
    industry: str = ""
    job_category: str = ""
    job_subcategory: str = ""
    specific_position: str = ""
    occasion_type: str = ""
    focus_areas: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)

    @field_validator("keywords")
    @classmethod
    def dedupe_keywords(cls, value: list[str]) -> list[str]:
        # Ordered set: stripped, no blanks, first occurrence wins
        return list(dict.fromkeys(k.strip() for k in value if k.strip()))

    def add_keyword(self, keyword: str) -> bool:
        """Append keyword unless blank or already present. Returns whether it was added."""
        keyword = keyword.strip()
        if not keyword or keyword in self.keywords:
            return False
        self.keywords.append(keyword)
        return True

    def remove_keyword(self, keyword: str) -> None:
        self.keywords = [k for k in self.keywords if k != keyword]


class PromptTemplate(CamelModel):
    id: str
    name: str
    description: str = ""
    content: str
    system_prompt: Optional[str] = None


def default_prompt_template() -> PromptTemplate:
    return PromptTemplate(
        id=DEFAULT_TEMPLATE_ID,
        name=DEFAULT_TEMPLATE_NAME,
        description=DEFAULT_TEMPLATE_DESCRIPTION,
        content=DEFAULT_PROMPT_TEMPLATE,
    )


class GenerationSettings(CamelModel):
    duration: str = "60"  # seconds
    custom_duration: str = ""
    language: str = "Chinese"
    style: str = "balanced"
    structure: str = "skills_first"
    tone: str = "Professional"
    output_length: str = "Medium"
    highlight_strengths: bool = True
    include_call_to_action: bool = True
    focus_on_recent_experience: bool = False

    use_custom_prompt: bool = False
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    active_prompt_id: str = DEFAULT_TEMPLATE_ID
    prompt_templates: dict[str, PromptTemplate] = Field(
        default_factory=lambda: {DEFAULT_TEMPLATE_ID: default_prompt_template()}
    )

    @property
    def effective_duration(self) -> str:
        return self.custom_duration or self.duration

    @property
    def active_template(self) -> Optional[PromptTemplate]:
        return self.prompt_templates.get(self.active_prompt_id)


class FormData(CamelModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    industry_settings: IndustrySettings = Field(default_factory=IndustrySettings)
    generation_settings: GenerationSettings = Field(default_factory=GenerationSettings)


def default_form_data() -> FormData:
    """Blank form with one empty row in each list section."""
    return FormData(
        personal_info=PersonalInfo(
            education=[Education()],
            work_experience=[WorkExperience()],
            skills=[Skill()],
        )
    )
