"""Open-ended answer grading prompt. Uses library core template."""

from __future__ import annotations

from agents.core.prompt_builder import build_from_template

GRADER_SYSTEM_PROMPT = (
    "You are an expert pharmacy training instructor. "
    "Provide grades and feedback in valid JSON format only."
)

TEMPLATE_GRADER = """{system_prompt}

You are grading a pharmacy technician's answer to a training question.

Question: {question}

Student's Answer: {answer}

Grading Criteria:
- GOOD: {good_criteria}
- MEDIUM: {medium_criteria}
- BAD: {bad_criteria}

Provide a grade (good, medium, or bad) and constructive feedback."""


def build_grader_prompt(
    *,
    question: str,
    answer: str,
    good_criteria: str,
    medium_criteria: str,
    bad_criteria: str,
) -> str:
    return build_from_template(
        TEMPLATE_GRADER,
        system_prompt=GRADER_SYSTEM_PROMPT,
        question=question,
        answer=answer,
        good_criteria=good_criteria,
        medium_criteria=medium_criteria,
        bad_criteria=bad_criteria,
    ).strip()
