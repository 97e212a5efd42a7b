"""Template substitution for prompt templates.

    render("Hi {name}", {"name": "王小明"})  ->  "Hi 王小明"

Only keys present in the variable map are substituted. A placeholder with no
matching key stays in the output as-is unless strip_unmatched is set.
"""

import re
from typing import Mapping, Optional

PLACEHOLDER_RE = re.compile(r"\{([^{}\s]+)\}")


def render(
    template: str,
    variables: Mapping[str, Optional[str]],
    *,
    strip_unmatched: bool = False,
) -> str:
    """Replace every {key} occurrence for each key in variables.

    None values render as the empty string. Substituted values are never
    scanned again, so a value containing "{x}" is emitted literally.
    """

    def _substitute(match: re.Match) -> str:
        key = match.group(1)
        if key in variables:
            value = variables[key]
            return "" if value is None else str(value)
        return "" if strip_unmatched else match.group(0)

    return PLACEHOLDER_RE.sub(_substitute, template)


def placeholders(template: str) -> list[str]:
    """Placeholder names in order of first appearance."""
    seen: list[str] = []
    for name in PLACEHOLDER_RE.findall(template):
        if name not in seen:
            seen.append(name)
    return seen
