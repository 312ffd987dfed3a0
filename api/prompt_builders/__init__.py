"""
App prompt builders: build prompts for the language model using library core template.
All prompt content and templates live here; agents and services receive built prompts.
"""

from api.prompt_builders.consultant import build_consultant_system_prompt, build_consultation_prompt
from api.prompt_builders.grader import build_grader_prompt
from api.prompt_builders.insights import build_insights_prompt

__all__ = [
    "build_consultant_system_prompt",
    "build_consultation_prompt",
    "build_grader_prompt",
    "build_insights_prompt",
]
