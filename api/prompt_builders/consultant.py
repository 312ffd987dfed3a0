"""Pharmacy consultant system prompt and conversation prompt."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from agents.core.prompt_builder import build_from_template, render_transcript

CONSULTANT_SYSTEM_PROMPT = (
    "You are a knowledgeable pharmacy consultant. This is for a pharmacy technician. "
    "Make sure they are not exceeding scope of practice. Provide accurate, helpful "
    "guidance on pharmacy-related questions. Be professional and concise."
)

TEMPLATE_CONSULTATION = """{system_prompt}

{history_block}User: {user_input}
Consultant:"""

TURN_LABELS = {"user": "User", "assistant": "Consultant"}


def build_consultant_system_prompt(extra: Optional[str] = None) -> str:
    """Default consultant role, optionally followed by site-specific guidance."""
    if extra and extra.strip():
        return f"{CONSULTANT_SYSTEM_PROMPT}\n\n{extra.strip()}"
    return CONSULTANT_SYSTEM_PROMPT


def build_consultation_prompt(
    *,
    user_input: str,
    history: Sequence[Tuple[str, str]] = (),
    system_prompt: str = CONSULTANT_SYSTEM_PROMPT,
) -> str:
    """history: chronological (role, text) pairs, role in {"user", "assistant"}."""
    transcript = render_transcript(history, TURN_LABELS)
    return build_from_template(
        TEMPLATE_CONSULTATION,
        system_prompt=system_prompt,
        history_block=(transcript + "\n") if transcript else "",
        user_input=user_input,
    )
