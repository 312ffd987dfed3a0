"""Insights prompt builder: strategic recommendations for training managers."""

from __future__ import annotations

import json
from typing import Any, Dict

from agents.core.prompt_builder import build_from_template

INSIGHTS_SYSTEM_PROMPT = (
    "You are an educational analytics AI providing actionable insights for "
    "pharmacy technician training programs."
)

TEMPLATE_INSIGHTS = """{system_prompt}

Given the following training data, provide 2-3 additional actionable insights or recommendations for pharmacy technician managers.

Training data summary (JSON):
{summary_json}

Provide brief, actionable recommendations (1-2 sentences each) focusing on:
1. Specific training interventions
2. Individual coaching strategies
3. Team development opportunities

Format as a numbered list."""


def build_insights_prompt(summary: Dict[str, Any]) -> str:
    """Embed the bounded statistics summary as JSON."""
    return build_from_template(
        TEMPLATE_INSIGHTS,
        system_prompt=INSIGHTS_SYSTEM_PROMPT,
        summary_json=json.dumps(summary, indent=2, default=str),
    ).strip()
