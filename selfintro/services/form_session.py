"""The profile, target position and settings being edited.

Section updates replace whole fields; list sections (education, work
experience, skills) are edited by index.
"""

from typing import Optional

from selfintro.schemas.form import (
    Education,
    FormData,
    GenerationSettings,
    IndustrySettings,
    PersonalInfo,
    Skill,
    WorkExperience,
    default_form_data,
)


class FormSession:
    def __init__(self, form_data: Optional[FormData] = None):
        self._form_data = form_data if form_data is not None else default_form_data()

    @property
    def form_data(self) -> FormData:
        return self._form_data

    def snapshot(self) -> FormData:
        return self._form_data.model_copy(deep=True)

    def load(self, form_data: FormData) -> None:
        """Replace the whole form, e.g. when replaying a history record."""
        self._form_data = form_data.model_copy(deep=True)

    def reset(self) -> None:
        self._form_data = default_form_data()

    # ── Section updates ───────────────────────────────────────────────────────

    def update_personal_info(self, **fields) -> None:
        info = self._form_data.personal_info
        self._form_data.personal_info = PersonalInfo.model_validate({**info.model_dump(), **fields})

    def update_industry_settings(self, **fields) -> None:
        industry = self._form_data.industry_settings
        self._form_data.industry_settings = IndustrySettings.model_validate({**industry.model_dump(), **fields})

    def update_generation_settings(self, **fields) -> None:
        gen = self._form_data.generation_settings
        self._form_data.generation_settings = GenerationSettings.model_validate({**gen.model_dump(), **fields})

    # ── List sections ─────────────────────────────────────────────────────────

    def add_education(self, education: Optional[Education] = None) -> None:
        self._form_data.personal_info.education.append(education or Education())

    def update_education(self, index: int, **fields) -> None:
        entries = self._form_data.personal_info.education
        entries[index] = entries[index].model_copy(update=fields)

    def remove_education(self, index: int) -> None:
        del self._form_data.personal_info.education[index]

    def add_work_experience(self, experience: Optional[WorkExperience] = None) -> None:
        self._form_data.personal_info.work_experience.append(experience or WorkExperience())

    def update_work_experience(self, index: int, **fields) -> None:
        entries = self._form_data.personal_info.work_experience
        entries[index] = entries[index].model_copy(update=fields)

    def remove_work_experience(self, index: int) -> None:
        del self._form_data.personal_info.work_experience[index]

    def add_skill(self, skill: Optional[Skill] = None) -> None:
        self._form_data.personal_info.skills.append(skill or Skill())

    def update_skill(self, index: int, **fields) -> None:
        entries = self._form_data.personal_info.skills
        entries[index] = entries[index].model_copy(update=fields)

    def remove_skill(self, index: int) -> None:
        del self._form_data.personal_info.skills[index]

    # ── Keywords ──────────────────────────────────────────────────────────────

    def add_keyword(self, keyword: str) -> bool:
        return self._form_data.industry_settings.add_keyword(keyword)

    def remove_keyword(self, keyword: str) -> None:
        self._form_data.industry_settings.remove_keyword(keyword)
