"""Tests for flattening form data into prompt text."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from selfintro import prompts
from selfintro.schemas.form import (
    Education,
    FormData,
    GenerationSettings,
    IndustrySettings,
    PersonalInfo,
    PromptTemplate,
    Skill,
    WorkExperience,
)
from selfintro.services.prompt_builder import (
    build_prompt,
    build_variables,
    format_education,
    format_skills,
    format_work_experience,
    map_degree,
    resolve_system_prompt,
)


def _form(**gen_fields) -> FormData:
    return FormData(
        personal_info=PersonalInfo(
            name="王小明",
            age="28",
            education=[
                Education(school="台大", degree="master", major="資工", graduation_year="2020"),
                Education(school="成大", degree="bachelor", major="電機", graduation_year="2018"),
            ],
            work_experience=[
                WorkExperience(company="Acme", position="Engineer", start_date="2021-07", is_current=True),
            ],
            skills=[Skill(name="Python", level="expert"), Skill(name="Go")],
        ),
        industry_settings=IndustrySettings(
            industry="科技",
            specific_position="後端工程師",
            keywords=["分散式系統", "雲端"],
        ),
        generation_settings=GenerationSettings(**gen_fields),
    )


class TestFormatting:
    """Test list sections flatten to one entry per line."""

    def test_education_one_line_per_entry(self):
        text = format_education(_form().personal_info.education)
        lines = text.split("\n")
        assert len(lines) == 2
        assert lines[0].startswith("台大")
        assert map_degree("master") in lines[0]

    def test_blank_entries_skipped(self):
        assert format_education([Education(), Education(school="  ")]) == ""
        assert format_skills([Skill()]) == ""

    def test_current_job(self):
        text = format_work_experience(_form().personal_info.work_experience)
        assert "Acme" in text
        assert "現在" in text

    def test_skill_without_level(self):
        assert format_skills([Skill(name="Go")]) == "Go"

    def test_unknown_degree_passes_through(self):
        assert map_degree("diploma") == "diploma"


class TestBuildVariables:
    """Test the placeholder map."""

    def test_keys_and_values(self):
        variables = build_variables(_form())
        assert variables["name"] == "王小明"
        assert variables["job_position"] == "後端工程師"
        assert variables["keywords"] == "分散式系統、雲端"
        assert variables["duration"] == "60"

    def test_custom_duration_wins(self):
        variables = build_variables(_form(duration="60", custom_duration="90"))
        assert variables["duration"] == "90"

    def test_all_values_are_strings(self):
        assert all(isinstance(v, str) for v in build_variables(FormData()).values())


class TestBuildPrompt:
    """Test standard and custom prompt assembly."""

    def test_standard_prompt_by_default(self):
        prompt = build_prompt(_form())
        assert "分散式系統" in prompt
        assert prompts.PERSONAL_INFO_HEADER in prompt
        assert "姓名：王小明" in prompt

    def test_custom_template_rendered(self):
        prompt = build_prompt(_form(use_custom_prompt=True, prompt_template="Hi {name}"))
        assert prompt.startswith("Hi 王小明")

    def test_custom_template_ignored_when_disabled(self):
        prompt = build_prompt(_form(use_custom_prompt=False, prompt_template="Hi {name}"))
        assert not prompt.startswith("Hi ")

    def test_unmatched_placeholder_kept_by_default(self):
        prompt = build_prompt(_form(use_custom_prompt=True, prompt_template="Hi {nickname}"))
        assert prompt.startswith("Hi {nickname}")

    def test_unmatched_placeholder_stripped_on_request(self):
        prompt = build_prompt(
            _form(use_custom_prompt=True, prompt_template="Hi {nickname}!"),
            strip_unmatched=True,
        )
        assert prompt.startswith("Hi !")

    def test_multiline_values_indented(self):
        prompt = build_prompt(_form())
        assert "\n  成大" in prompt

    def test_empty_form_has_no_context_blocks(self):
        prompt = build_prompt(FormData())
        assert prompts.PERSONAL_INFO_HEADER not in prompt
        assert prompts.TARGET_POSITION_HEADER not in prompt


class TestSystemPrompt:
    """Test the system prompt override."""

    def _settings(self, system_prompt, use_custom=True) -> GenerationSettings:
        template = PromptTemplate(id="t1", name="T", content="Hi {name}", system_prompt=system_prompt)
        return GenerationSettings(
            use_custom_prompt=use_custom,
            active_prompt_id="t1",
            prompt_templates={"t1": template},
        )

    def test_override_used(self):
        assert resolve_system_prompt(self._settings("Be brief."), "default") == "Be brief."

    def test_blank_override_ignored(self):
        assert resolve_system_prompt(self._settings("   "), "default") == "default"

    def test_override_ignored_when_custom_prompt_off(self):
        assert resolve_system_prompt(self._settings("Be brief.", use_custom=False), "default") == "default"
