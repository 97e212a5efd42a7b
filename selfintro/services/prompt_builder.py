"""Prompt assembly for the provider adapters.

Flattens the nested form data into a flat {placeholder: text} map, then
renders either the active custom template or the standard prompt, followed
by the personal-information and target-position blocks.
"""

from typing import Optional

from selfintro import prompts
from selfintro.config import settings
from selfintro.schemas.form import (
    Education,
    FormData,
    GenerationSettings,
    Skill,
    WorkExperience,
)
from selfintro.templating import render


def map_degree(degree: str) -> str:
    return prompts.DEGREE_LABELS.get(degree, degree)


def map_skill_level(level: str) -> str:
    return prompts.SKILL_LEVEL_LABELS.get(level, level)


def _format_month(value: str) -> str:
    # "2021-07" -> "2021年07月"
    return f"{value.replace('-', '年', 1)}月" if value else ""


def format_education(entries: list[Education]) -> str:
    lines = []
    for edu in entries:
        if not edu.school.strip():
            continue
        parts = [edu.school]
        if edu.major:
            parts.append(edu.major)
        if edu.degree:
            parts.append(map_degree(edu.degree))
        if edu.graduation_year:
            parts.append(f"{edu.graduation_year}年畢業")
        lines.append("，".join(parts))
    return "\n".join(lines)


def format_work_experience(entries: list[WorkExperience]) -> str:
    lines = []
    for work in entries:
        if not work.company.strip():
            continue
        parts = [work.company]
        if work.position:
            parts.append(work.position)
        if work.start_date:
            end = "現在" if work.is_current else _format_month(work.end_date)
            parts.append(f"{_format_month(work.start_date)}至{end}")
        if work.description:
            parts.append(work.description)
        lines.append("，".join(parts))
    return "\n".join(lines)


def format_skills(entries: list[Skill]) -> str:
    lines = []
    for skill in entries:
        if not skill.name.strip():
            continue
        if skill.level:
            lines.append(f"{skill.name}（{map_skill_level(skill.level)}）")
        else:
            lines.append(skill.name)
    return "\n".join(lines)


def build_variables(form_data: FormData) -> dict[str, str]:
    """Every placeholder a template may use, as display text."""
    info = form_data.personal_info
    industry = form_data.industry_settings
    gen = form_data.generation_settings
    return {
        "duration": gen.effective_duration,
        "language": gen.language,
        "style": gen.style,
        "tone": gen.tone,
        "structure": gen.structure,
        "output_length": gen.output_length,
        "industry": industry.industry,
        "job_category": industry.job_category,
        "job_subcategory": industry.job_subcategory,
        "job_position": industry.specific_position,
        "occasion_type": industry.occasion_type,
        "keywords": "、".join(industry.keywords),
        "focus_areas": "、".join(industry.focus_areas),
        "name": info.name,
        "age": info.age,
        "education": format_education(info.education),
        "work_experience": format_work_experience(info.work_experience),
        "skills": format_skills(info.skills),
        "projects": info.projects,
        "awards": info.awards,
        "interests": info.interests,
    }


def _standard_prompt(form_data: FormData, variables: dict[str, str]) -> str:
    gen = form_data.generation_settings
    industry = form_data.industry_settings

    prompt = render(prompts.STANDARD_PROMPT_HEAD, variables)
    if industry.focus_areas:
        prompt += render(prompts.STANDARD_FOCUS_AREAS, variables)
    if industry.keywords:
        prompt += render(prompts.STANDARD_KEYWORDS, variables)

    structure = prompts.STRUCTURE_INSTRUCTIONS.get(gen.structure, prompts.DEFAULT_STRUCTURE_INSTRUCTION)
    prompt += render(prompts.STANDARD_STRUCTURE, {"structure_instruction": structure})
    prompt += render(prompts.STANDARD_OUTPUT_LENGTH, variables)

    if gen.highlight_strengths:
        prompt += prompts.HIGHLIGHT_STRENGTHS_INSTRUCTION
    if gen.include_call_to_action:
        prompt += prompts.CALL_TO_ACTION_INSTRUCTION
    if gen.focus_on_recent_experience:
        prompt += prompts.RECENT_EXPERIENCE_INSTRUCTION
    return prompt


def _context_block(header: str, fields: list[tuple[str, str]], variables: dict[str, str]) -> str:
    lines = []
    for key, label in fields:
        value = variables.get(key, "")
        if not value:
            continue
        # Multi-line values (one entry per line) get indented under their label
        value = value.replace("\n", "\n  ")
        lines.append(f"{label}：{value}")
    if not lines:
        return ""
    return header + "\n" + "\n".join(lines)


def build_prompt(form_data: FormData, *, strip_unmatched: Optional[bool] = None) -> str:
    """The full user message sent to a provider."""
    if strip_unmatched is None:
        strip_unmatched = settings.STRIP_UNMATCHED_PLACEHOLDERS

    gen = form_data.generation_settings
    variables = build_variables(form_data)

    if gen.use_custom_prompt and gen.prompt_template:
        prompt = render(gen.prompt_template, variables, strip_unmatched=strip_unmatched)
    else:
        prompt = _standard_prompt(form_data, variables)

    prompt += _context_block(prompts.PERSONAL_INFO_HEADER, prompts.PERSONAL_INFO_FIELDS, variables)
    prompt += _context_block(prompts.TARGET_POSITION_HEADER, prompts.TARGET_POSITION_FIELDS, variables)
    return prompt


def resolve_system_prompt(generation_settings: GenerationSettings, default: str) -> str:
    """The active template's system prompt when custom prompts are on and it is non-empty."""
    if generation_settings.use_custom_prompt:
        template = generation_settings.active_template
        if template is not None and template.system_prompt and template.system_prompt.strip():
            return template.system_prompt
    return default
