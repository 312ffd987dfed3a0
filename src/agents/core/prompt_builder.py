"""
Core prompt builder: template-based prompt construction.
The app owns the template strings (api/prompt_builders); this module only fills them.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Tuple


class _SafeFormatDict(dict):
    """Mapping that returns empty string for missing keys (for str.format_map)."""

    def __missing__(self, key: str) -> str:
        return ""


def build_from_template(template: str, **kwargs: Any) -> str:
    """
    Fill a template with the given keyword arguments.
    Missing keys and None values render as empty strings.
    """
    if not template:
        return ""
    safe = {k: ("" if v is None else v) for k, v in kwargs.items()}
    return template.format_map(_SafeFormatDict(safe))


def render_transcript(turns: Iterable[Tuple[str, str]], labels: Mapping[str, str]) -> str:
    """One "Label: text" line per (role, text) turn; unknown roles use the role name."""
    lines = [f"{labels.get(role, role)}: {text}" for role, text in turns]
    return "\n".join(lines)
